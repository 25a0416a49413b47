"""Infrastructure stubs for development and testing.

Available stubs:
- InMemoryDocumentStore: dict-backed document store with CAS semantics
  and failure injection for crash-recovery tests

WARNING: These stubs are NOT for production use.
Production implementations are in src/infrastructure/adapters/.
"""

from src.infrastructure.stubs.document_store_stub import InMemoryDocumentStore

__all__: list[str] = ["InMemoryDocumentStore"]
