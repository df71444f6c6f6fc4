"""Small built-in catalogue used when no seed file is configured."""

from __future__ import annotations

from typing import Any

from alerta_rag.infrastructure.repositories.in_memory_repositories import (
    Repositories,
    repositories_from_seed,
)

PIX_ID = "3f0c9a52-6d1e-4b8a-9c1f-0a1b2c3d4e01"
PJ_HOURS_ID = "3f0c9a52-6d1e-4b8a-9c1f-0a1b2c3d4e02"
PAYMENT_ID = "3f0c9a52-6d1e-4b8a-9c1f-0a1b2c3d4e03"
USER_SIGNUP_ID = "3f0c9a52-6d1e-4b8a-9c1f-0a1b2c3d4e04"
INVOICE_ID = "3f0c9a52-6d1e-4b8a-9c1f-0a1b2c3d4e05"
TAX_ID = "3f0c9a52-6d1e-4b8a-9c1f-0a1b2c3d4e06"
REPORT_ID = "3f0c9a52-6d1e-4b8a-9c1f-0a1b2c3d4e07"

PAYMENTS_PROJECT_ID = "9b1d2e3f-4a5b-4c6d-8e7f-112233445566"

DEMO_SEED: dict[str, Any] = {
    "rules": [
        {
            "id": PIX_ID,
            "name": "REGRA_VALIDACAO_PIX",
            "domain": "PAYMENT",
            "description": "Valida formato e titularidade da chave PIX antes de confirmar o pagamento.",
            "criticality": "CRITICA",
            "source_file": "src/main/java/com/empresa/pix/PixValidator.java",
        },
        {
            "id": PJ_HOURS_ID,
            "name": "REGRA_CALCULO_HORAS_PJ",
            "domain": "BILLING",
            "description": "Cálculo de horas trabalhadas de prestadores pessoa jurídica (CNPJ).",
            "criticality": "ALTA",
            "source_file": "src/main/java/com/empresa/billing/HorasPjCalculator.java",
        },
        {
            "id": PAYMENT_ID,
            "name": "REGRA_VALIDACAO_PAGAMENTO",
            "domain": "PAYMENT",
            "description": "Bloqueia pagamentos acima do limite diário sem aprovação dupla.",
            "criticality": "ALTA",
        },
        {
            "id": USER_SIGNUP_ID,
            "name": "REGRA_VALIDACAO_CADASTRO_USUARIO",
            "domain": "USER",
            "description": "Validação de CPF e documento no cadastro de pessoa física.",
            "criticality": "MEDIA",
        },
        {
            "id": INVOICE_ID,
            "name": "REGRA_GERACAO_FATURA",
            "domain": "BILLING",
            "description": "Gera a fatura mensal consolidando pedidos faturáveis.",
            "criticality": "MEDIA",
        },
        {
            "id": TAX_ID,
            "name": "REGRA_CALCULO_TRIBUTOS",
            "domain": "BILLING",
            "description": "Cálculo de tributos retidos na fonte por tipo de contrato.",
            "criticality": "ALTA",
        },
        {
            "id": REPORT_ID,
            "name": "REGRA_RELATORIO_FINANCEIRO",
            "domain": "GENERIC",
            "description": "Consolida relatório financeiro mensal para a diretoria.",
            "criticality": "BAIXA",
        },
    ],
    "incidents": [
        {
            "id": "a1000000-0000-4000-8000-000000000001",
            "business_rule_id": PIX_ID,
            "title": "Chave PIX aleatória rejeitada",
            "description": "Regex não aceitava chaves EVP com letras maiúsculas.",
            "severity": "HIGH",
            "occurred_at": "2024-03-02T10:15:00",
        },
        {
            "id": "a1000000-0000-4000-8000-000000000002",
            "business_rule_id": PJ_HOURS_ID,
            "title": "Horas extras PJ duplicadas",
            "description": "Fechamento mensal somou horas extras duas vezes.",
            "severity": "MEDIUM",
            "occurred_at": "2024-05-20T18:00:00",
        },
        {
            "id": "a1000000-0000-4000-8000-000000000003",
            "business_rule_id": PJ_HOURS_ID,
            "title": "Arredondamento de minutos",
            "description": "Frações de hora truncadas em vez de arredondadas.",
            "severity": "LOW",
            "occurred_at": "2024-01-11T09:30:00",
        },
    ],
    "ownerships": [
        {
            "id": "b2000000-0000-4000-8000-000000000001",
            "business_rule_id": PIX_ID,
            "team_name": "Squad Pagamentos",
            "team_type": "ENGINEERING",
            "role": "PRIMARY_OWNER",
            "contact_email": "pagamentos@empresa.com",
            "approval_required": True,
        },
        {
            "id": "b2000000-0000-4000-8000-000000000002",
            "business_rule_id": PJ_HOURS_ID,
            "team_name": "Faturamento",
            "team_type": "BUSINESS",
            "role": "PRIMARY_OWNER",
            "contact_email": "faturamento@empresa.com",
        },
    ],
    "dependencies": [
        {"source_rule_id": PIX_ID, "target_rule_id": PAYMENT_ID},
        {"source_rule_id": INVOICE_ID, "target_rule_id": PJ_HOURS_ID},
        {"source_rule_id": INVOICE_ID, "target_rule_id": TAX_ID},
    ],
    "projects": [
        {
            "id": PAYMENTS_PROJECT_ID,
            "name": "Backoffice Pagamentos",
            "rule_ids": [PIX_ID, PAYMENT_ID],
        }
    ],
}


def demo_repositories() -> Repositories:
    return repositories_from_seed(DEMO_SEED)
