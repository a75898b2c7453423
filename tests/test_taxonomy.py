"""
Error type taxonomy (taxonomy.py)

Tests ErrorType, ErrorTypeRepository built-ins, registration, lookup and
assignability.
"""

import pytest

from faultmap import (
    CORE_NAMESPACE,
    DuplicateTypeError,
    ErrorType,
    ErrorTypeRepository,
    SealedRepositoryError,
    create_default_repository,
)


# ============================================================================
# ErrorType
# ============================================================================

class TestErrorType:

    def test_qualified_name(self):
        t = ErrorType("HTTP", "NOT_FOUND")
        assert t.qualified_name == "HTTP:NOT_FOUND"
        assert str(t) == "HTTP:NOT_FOUND"
        assert repr(t) == "ErrorType('HTTP:NOT_FOUND')"

    def test_ancestors(self):
        root = ErrorType("CORE", "ANY")
        mid = ErrorType("CORE", "CONNECTIVITY", root)
        leaf = ErrorType("HTTP", "CONNECTIVITY", mid)
        assert list(leaf.ancestors()) == [leaf, mid, root]

    def test_split(self):
        assert ErrorType.split("HTTP:NOT_FOUND") == ("HTTP", "NOT_FOUND")
        assert ErrorType.split("ROUTING") == (CORE_NAMESPACE, "ROUTING")


# ============================================================================
# Built-ins
# ============================================================================

class TestBuiltins:

    def test_roots(self, repository):
        assert repository.roots() == [repository.any, repository.critical]

    def test_unknown_under_any(self, repository):
        assert repository.unknown.parent == repository.any

    def test_fatal_and_overload_under_critical(self, repository):
        assert repository.fatal.parent == repository.critical
        assert repository.overload.parent == repository.critical

    def test_domain_categories(self, repository):
        assert repository.connectivity.parent == repository.any
        assert repository.retry_exhausted.parent == repository.connectivity
        assert repository.transformation.parent == repository.any
        assert repository.client_security.parent == repository.security
        assert repository.server_security.parent == repository.security

    def test_critical_not_under_any(self, repository):
        assert not repository.is_assignable_to(repository.critical, repository.any)
        assert not repository.is_assignable_to(repository.fatal, repository.any)

    def test_builtin_lookup(self, repository):
        assert repository.lookup("CORE", "FATAL") is repository.fatal
        assert repository.lookup_name("CORE:TIMEOUT") is repository.timeout
        assert repository.lookup_name("EXPRESSION") is repository.expression

    def test_namespaces(self, repository):
        assert repository.namespaces() == {CORE_NAMESPACE}


# ============================================================================
# Registration
# ============================================================================

class TestRegistration:

    def test_register_custom(self, repository):
        t = repository.register("HTTP", "CONNECTIVITY", repository.connectivity)
        assert repository.lookup("HTTP", "CONNECTIVITY") is t
        assert t in repository
        assert "HTTP" in repository.namespaces()

    def test_register_new_root(self, repository):
        t = repository.register("APP", "BUSINESS", None)
        assert t in repository.roots()

    def test_duplicate(self, repository):
        repository.register("HTTP", "NOT_FOUND", repository.any)
        with pytest.raises(DuplicateTypeError) as exc_info:
            repository.register("HTTP", "NOT_FOUND", repository.routing)
        assert exc_info.value.code == "DUPLICATE_ERROR_TYPE"
        assert exc_info.value.metadata == {"namespace": "HTTP", "identifier": "NOT_FOUND"}

    def test_duplicate_builtin(self, repository):
        with pytest.raises(DuplicateTypeError):
            repository.register("CORE", "UNKNOWN", repository.any)

    def test_same_identifier_other_namespace(self, repository):
        t = repository.register("HTTP", "UNKNOWN", repository.unknown)
        assert t != repository.unknown

    def test_sealed(self):
        repository = create_default_repository(seal=True)
        assert repository.sealed
        with pytest.raises(SealedRepositoryError) as exc_info:
            repository.register("HTTP", "NOT_FOUND", repository.any)
        assert "[REPOSITORY_SEALED]" in str(exc_info.value)

    def test_seal_returns_repository(self):
        repository = ErrorTypeRepository()
        assert repository.seal() is repository


# ============================================================================
# Lookup & assignability
# ============================================================================

class TestQueries:

    def test_lookup_not_found(self, repository):
        assert repository.lookup("HTTP", "MISSING") is None
        assert repository.lookup_name("NOPE") is None

    def test_assignable_round_trip(self, repository):
        parent = repository.register("HTTP", "CONNECTIVITY", repository.connectivity)
        child = repository.register("HTTP", "TIMEOUT", parent)

        for ancestor in (child, parent, repository.connectivity, repository.any):
            assert repository.is_assignable_to(child, ancestor)

    def test_not_assignable_to_sibling(self, repository):
        child = repository.register("HTTP", "CONNECTIVITY", repository.connectivity)
        assert not repository.is_assignable_to(child, repository.transformation)
        assert not repository.is_assignable_to(repository.connectivity, child)

    def test_children(self, repository):
        assert repository.children(repository.security) == [
            repository.client_security,
            repository.server_security,
        ]

    def test_contains_foreign_type(self, repository):
        assert ErrorType("CORE", "ANY") in repository
        assert ErrorType("CORE", "NOPE") not in repository
        assert "CORE:ANY" not in repository

    def test_iteration_and_len(self, repository):
        types = list(repository)
        assert len(types) == len(repository)
        assert repository.fatal in types
