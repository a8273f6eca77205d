"""
Fulcrum Controller System

Action controllers, the registry that creates them, and the front
controller that runs the dispatch loop.

Example:
    from fulcrum.controller import Controller

    class BlogController(Controller):
        def index_action(self, params):
            self.response.append("latest posts")

        def show_action(self, params):
            if not params.get("id"):
                self.forward("index")
                return
            self.response.append(f"post {params['id']}")
"""

from .base import Controller
from .faults import (
    InvalidControllerFault,
    InvalidControllerActionFault,
    ControllerIntegrityFault,
    DispatchLoopFault,
)
from .registry import ControllerRegistry, default_registry, is_controller_class
from .loader import (
    CONTROLLER_FILE_EXISTS_KEY,
    controller_file_exists,
    create_controller_instance,
)
from .policy import DispatchPolicy
from .front import FrontController

__all__ = [
    # Base
    "Controller",

    # Faults
    "InvalidControllerFault",
    "InvalidControllerActionFault",
    "ControllerIntegrityFault",
    "DispatchLoopFault",

    # Registry
    "ControllerRegistry",
    "default_registry",
    "is_controller_class",

    # Loading
    "CONTROLLER_FILE_EXISTS_KEY",
    "controller_file_exists",
    "create_controller_instance",

    # Front controller
    "DispatchPolicy",
    "FrontController",
]
