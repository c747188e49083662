"""Configuration adapters."""

from tcdd_routes.adapters.config.app_config import AppConfig
from tcdd_routes.adapters.config.routing_policy_loader import RoutingPolicyLoader

__all__ = ["AppConfig", "RoutingPolicyLoader"]
