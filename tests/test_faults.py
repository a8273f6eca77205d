"""
Tests for the fault taxonomy.
"""

import pytest

from fulcrum.cache import CacheConfigFault
from fulcrum.controller import (
    ControllerIntegrityFault,
    DispatchLoopFault,
    InvalidControllerActionFault,
    InvalidControllerFault,
)
from fulcrum.faults import (
    ConfigInvalidFault,
    Fault,
    FaultDomain,
    RouteNotFoundFault,
    Severity,
)


class TestFault:

    def test_str_includes_code(self):
        fault = Fault("BLOG_MISSING", "Blog post 42 does not exist", domain=FaultDomain.DISPATCH)

        assert str(fault) == "[BLOG_MISSING] Blog post 42 does not exist"
        assert fault.severity == Severity.ERROR
        assert fault.retryable is False

    def test_missing_code_rejected(self):
        with pytest.raises(TypeError):
            Fault(message="no code", domain=FaultDomain.SYSTEM)

    def test_class_attribute_defaults(self):
        class Maintenance(Fault):
            code = "MAINTENANCE"
            message = "Down for maintenance"
            domain = FaultDomain.SYSTEM

        fault = Maintenance(public=True)

        assert fault.severity == Severity.FATAL
        assert fault.public is True

    def test_to_dict(self):
        data = RouteNotFoundFault("/nope", "GET").to_dict()

        assert data == {
            "code": "ROUTE_NOT_FOUND",
            "message": "Route not found: GET /nope",
            "domain": "routing",
            "severity": "error",
            "retryable": False,
            "public": True,
            "metadata": {"path": "/nope", "method": "GET"},
        }

    def test_domain_equality(self):
        assert FaultDomain.DISPATCH == "dispatch"
        assert FaultDomain("dispatch") == FaultDomain.DISPATCH
        assert len({FaultDomain.DISPATCH, FaultDomain("dispatch")}) == 1


class TestFaultTypes:

    @pytest.mark.parametrize("fault,code,domain", [
        (InvalidControllerFault("c/BlogController.py"), "CONTROLLER_NOT_FOUND", "dispatch"),
        (InvalidControllerActionFault("BlogController", "x_action"),
         "CONTROLLER_ACTION_NOT_CALLABLE", "dispatch"),
        (ControllerIntegrityFault("BlogController", "c/BlogController.py"),
         "CONTROLLER_CLASS_MISSING", "dispatch"),
        (DispatchLoopFault(5), "DISPATCH_LOOP_LIMIT", "dispatch"),
        (ConfigInvalidFault("debug", "bad"), "CONFIG_INVALID", "config"),
        (CacheConfigFault("bad"), "CACHE_CONFIG_INVALID", "cache"),
    ])
    def test_codes_and_domains(self, fault, code, domain):
        assert isinstance(fault, Fault)
        assert fault.code == code
        assert fault.domain == domain

    def test_invalid_controller_message(self):
        fault = InvalidControllerFault("controllers/BlogController.py", "BlogController")

        assert fault.message == 'Controller file "controllers/BlogController.py" does not exist'
        assert fault.metadata["controller_class"] == "BlogController"

    def test_integrity_is_fatal(self):
        assert ControllerIntegrityFault("A", "b").severity == Severity.FATAL
