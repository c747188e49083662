"""Geographic sanity policy for connected-route search."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DetourRule:
    """Travelling from ``from_id`` to ``to_id`` via any of ``via_ids`` is a detour."""

    from_id: int
    via_ids: frozenset[int]
    to_id: int


@dataclass(frozen=True)
class GroupDetourRule:
    """Same as DetourRule, expressed with named station groups."""

    from_groups: tuple[str, ...]
    via_groups: tuple[str, ...]
    to_groups: tuple[str, ...]


@dataclass(frozen=True)
class RoutingPolicy:
    """Hub priorities and known-illogical detours."""

    major_hubs: tuple[int, ...] = ()
    detours: tuple[DetourRule, ...] = ()
    station_groups: dict[str, frozenset[int]] = field(default_factory=dict)
    group_detours: tuple[GroupDetourRule, ...] = ()

    def is_hub(self, station_id: int) -> bool:
        """Whether the station is in the prioritized hub list."""
        return station_id in self.major_hubs

    def _in_groups(self, station_id: int, groups: tuple[str, ...]) -> bool:
        return any(station_id in self.station_groups.get(group, frozenset()) for group in groups)

    def is_illogical(self, from_id: int, via_id: int, to_id: int) -> bool:
        """Whether routing ``from_id -> via_id -> to_id`` goes backwards."""
        for rule in self.detours:
            if rule.from_id == from_id and via_id in rule.via_ids and rule.to_id == to_id:
                return True

        for group_rule in self.group_detours:
            if (
                self._in_groups(via_id, group_rule.via_groups)
                and self._in_groups(from_id, group_rule.from_groups)
                and self._in_groups(to_id, group_rule.to_groups)
            ):
                return True

        return False
