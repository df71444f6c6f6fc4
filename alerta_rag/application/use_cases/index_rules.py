from __future__ import annotations

import logging
from dataclasses import dataclass

from alerta_rag.application.dto.index_dto import IndexReport
from alerta_rag.application.ports.embedding_port import EmbeddingPort
from alerta_rag.application.ports.repository_port import BusinessRuleRepositoryPort
from alerta_rag.application.ports.vector_store_port import RuleVectorStorePort
from alerta_rag.domain.errors import EmbeddingError, VectorStoreError
from alerta_rag.domain.models import BusinessRule

logger = logging.getLogger(__name__)


def rule_index_text(rule: BusinessRule) -> str:
    # name + description + content, blank parts dropped
    parts = (rule.name, rule.description, rule.content)
    return " ".join(p.strip() for p in parts if p and p.strip())


@dataclass
class IndexBusinessRules:
    """Embeds every rule of the catalogue into the vector store.

    Runs at startup (composition root / CLI), never inside a retrieval request.
    Rules already present in the store and rules without text are skipped.
    A failure on one rule is counted and does not stop the pass.
    """

    rules: BusinessRuleRepositoryPort
    embedding: EmbeddingPort
    vector_store: RuleVectorStorePort
    force: bool = False

    def execute(self) -> IndexReport:
        indexed = skipped = 0
        failed: list[str] = []

        for rule in self.rules.find_all():
            text = rule_index_text(rule)
            try:
                # 1) Already indexed?
                if not self.force and self.vector_store.get_embedding(rule.id) is not None:
                    skipped += 1
                    continue

                # 2) Text to embed
                if not text:
                    logger.debug("rule %s has no text to index; skipping", rule.id)
                    skipped += 1
                    continue

                # 3) Embed + persist
                vector = self.embedding.embed(text)
                self.vector_store.save(rule.id, vector)
            except (EmbeddingError, VectorStoreError) as ex:
                logger.warning("indexing rule %s failed: %s", rule.id, ex)
                failed.append(rule.id)
                continue
            indexed += 1

        report = IndexReport(
            indexed=indexed, skipped=skipped, failed=len(failed), failed_ids=tuple(failed)
        )
        try:
            store_size = str(self.vector_store.size())
        except VectorStoreError:
            store_size = "unknown"
        logger.info(
            "rule index pass: indexed=%d skipped=%d failed=%d (store size=%s)",
            report.indexed,
            report.skipped,
            report.failed,
            store_size,
        )
        return report
