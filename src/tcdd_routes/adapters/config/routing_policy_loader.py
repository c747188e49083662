"""Routing policy loader."""

import logging
from typing import Any

from tcdd_routes.domain.models.routing_policy import DetourRule, GroupDetourRule, RoutingPolicy

logger = logging.getLogger(__name__)

# Main interchange stations, explored first during connected search
DEFAULT_MAJOR_HUBS = (98, 1325, 48, 87, 20, 1135, 180, 753)

ISTANBUL_ASIAN_SIDE = (48, 1325)

DEFAULT_DETOURS: tuple[dict[str, Any], ...] = (
    {"from": 1135, "via": ISTANBUL_ASIAN_SIDE, "to": (98, 87)},
    {"from": 98, "via": ISTANBUL_ASIAN_SIDE, "to": (1135, 180)},
    {"from": 87, "via": ISTANBUL_ASIAN_SIDE, "to": (1135, 180)},
    {"from": 180, "via": ISTANBUL_ASIAN_SIDE, "to": (98, 87)},
)

DEFAULT_STATION_GROUPS: dict[str, tuple[int, ...]] = {
    "istanbul": ISTANBUL_ASIAN_SIDE,
    "ankara": (98,),
    "izmit": (1135,),
    "eskisehir": (87,),
    "izmir": (180,),
    "gebze": (20,),
}

DEFAULT_GROUP_DETOURS: tuple[dict[str, Any], ...] = (
    {"from": ("izmit",), "via": ("istanbul",), "to": ("ankara", "eskisehir")},
    {"from": ("ankara", "eskisehir"), "via": ("istanbul",), "to": ("izmit",)},
)


def _ids(value: Any) -> tuple[int, ...]:
    """Accept a single station id or a list of ids."""
    if isinstance(value, (list, tuple)):
        return tuple(int(v) for v in value)
    return (int(value),)


def _names(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return (str(value),)


class RoutingPolicyLoader:
    """Builds the geographic routing policy from the [routing] TOML table."""

    @staticmethod
    def load_detours(detours_data: Any) -> tuple[DetourRule, ...]:
        """Expand detour entries into one rule per (from, to) pair.

        Each entry has ``from``, ``via`` and ``to`` keys; ``from`` and ``to``
        may be a station id or a list of ids.
        """
        if not isinstance(detours_data, (list, tuple)):
            raise ValueError("TOML config 'routing.detours' must be a list")

        rules = []
        for entry in detours_data:
            if not isinstance(entry, dict) or not {"from", "via", "to"} <= entry.keys():
                raise ValueError("Each routing detour needs 'from', 'via' and 'to'")
            via_ids = frozenset(_ids(entry["via"]))
            for from_id in _ids(entry["from"]):
                for to_id in _ids(entry["to"]):
                    rules.append(DetourRule(from_id=from_id, via_ids=via_ids, to_id=to_id))
        return tuple(rules)

    @staticmethod
    def load_group_detours(
        group_data: Any, station_groups: dict[str, frozenset[int]]
    ) -> tuple[GroupDetourRule, ...]:
        """Load detour rules expressed with named station groups."""
        if not isinstance(group_data, (list, tuple)):
            raise ValueError("TOML config 'routing.group_detours' must be a list")

        rules = []
        for entry in group_data:
            if not isinstance(entry, dict) or not {"from", "via", "to"} <= entry.keys():
                raise ValueError("Each routing group detour needs 'from', 'via' and 'to'")
            rule = GroupDetourRule(
                from_groups=_names(entry["from"]),
                via_groups=_names(entry["via"]),
                to_groups=_names(entry["to"]),
            )
            unknown = {
                group
                for group in rule.from_groups + rule.via_groups + rule.to_groups
                if group not in station_groups
            }
            if unknown:
                logger.warning(f"Routing group detour references unknown groups: {sorted(unknown)}")
            rules.append(rule)
        return tuple(rules)

    @staticmethod
    def load(routing_data: dict[str, Any] | None = None) -> RoutingPolicy:
        """Build a RoutingPolicy, using the built-in defaults for missing keys.

        Args:
            routing_data: The [routing] table, or None for the defaults.

        Returns:
            RoutingPolicy domain object.
        """
        routing_data = routing_data or {}

        major_hubs = _ids(routing_data.get("major_hubs", DEFAULT_MAJOR_HUBS))

        groups_data = routing_data.get("station_groups", DEFAULT_STATION_GROUPS)
        if not isinstance(groups_data, dict):
            raise ValueError("TOML config 'routing.station_groups' must be a table")
        station_groups = {str(name): frozenset(_ids(ids)) for name, ids in groups_data.items()}

        detours = RoutingPolicyLoader.load_detours(routing_data.get("detours", DEFAULT_DETOURS))
        group_detours = RoutingPolicyLoader.load_group_detours(
            routing_data.get("group_detours", DEFAULT_GROUP_DETOURS), station_groups
        )

        logger.debug(
            f"Routing policy: {len(major_hubs)} hubs, {len(detours)} detours, "
            f"{len(group_detours)} group detours"
        )
        return RoutingPolicy(
            major_hubs=major_hubs,
            detours=detours,
            station_groups=station_groups,
            group_detours=group_detours,
        )
