"""
Knowledge Module

Background knowledge for constraining searches: temporal tiers, explicit
forbidden/required edge rules with wildcard variable specs, and the legacy
knowledge-group rules.

A rule is an ordered pair (from-set, to-set) of variable names. Wildcard
specs are expanded against the variables known at the time of the call;
variables added later are not picked up by existing rules.
"""

import re
from enum import Enum
from typing import FrozenSet, Iterable, List, NamedTuple, Set, Tuple

from causal_search_core.graph import Graph, get_directed_edge_head, get_directed_edge_tail, is_directed_edge

Rule = Tuple[FrozenSet[str], FrozenSet[str]]

# Characters a wildcard may stand for.
_WILDCARD_RUN = r"[A-Za-z0-9:_\-.]*"


class KnowledgeEdge(NamedTuple):
    from_name: str
    to_name: str


class KnowledgeGroupType(Enum):
    FORBIDDEN = 1
    REQUIRED = 2


class KnowledgeGroup:
    """Legacy rule: every variable in from_variables to every variable in to_variables."""

    def __init__(self, group_type: KnowledgeGroupType, from_variables: Iterable[str] = (),
                 to_variables: Iterable[str] = ()):
        self.type = group_type
        self.from_variables = set(from_variables)
        self.to_variables = set(to_variables)

    def copy(self) -> "KnowledgeGroup":
        return KnowledgeGroup(self.type, self.from_variables, self.to_variables)

    def __eq__(self, other):
        return (isinstance(other, KnowledgeGroup) and self.type == other.type
                and self.from_variables == other.from_variables
                and self.to_variables == other.to_variables)

    def __repr__(self):
        return f"KnowledgeGroup({self.type.name}, {sorted(self.from_variables)} -> {sorted(self.to_variables)})"


class Knowledge:
    """
    Forbidden and required edge constraints.

    Required always wins: is_forbidden returns False for a required pair even
    if a rule or a tier would forbid it.

    Instances are built during algorithm configuration and treated as
    read-only during a search. They are not safe for concurrent mutation;
    hand each worker its own copy().
    """

    def __init__(self, variables: Iterable[str] = ()):
        self._variables: Set[str] = set()
        self._forbidden_rules: List[Rule] = []
        self._required_rules: List[Rule] = []
        self._tiers: List[Set[str]] = []
        self._tiers_forbidden_within: Set[int] = set()
        self._tiers_only_cause_next: Set[int] = set()
        self._knowledge_groups: List[KnowledgeGroup] = []
        self._group_rules: List[Rule] = []
        self.default_to_knowledge_layout = False

        for name in variables:
            self.add_variable(name)

    # Variables and specs

    def add_variable(self, name: str) -> None:
        if not name:
            raise ValueError(f"Bad variable name {name!r}")
        self._variables.add(name)

    def get_variables(self) -> List[str]:
        return sorted(self._variables)

    def _add_literal(self, spec: str) -> None:
        if "*" not in spec and "," not in spec:
            self.add_variable(spec)

    def _get_extent(self, spec: str) -> FrozenSet[str]:
        """Variables currently matched by a literal name or a comma-separated wildcard spec."""
        if "*" not in spec:
            return frozenset([spec]) if spec in self._variables else frozenset()

        extent = set()
        for part in (p.strip() for p in spec.split(",")):
            if not part:
                continue
            pattern = re.compile(_WILDCARD_RUN.join(re.escape(piece) for piece in part.split("*")))
            extent.update(v for v in self._variables if pattern.fullmatch(v))
        return frozenset(extent)

    # Tiers

    def _ensure_tiers(self, tier: int) -> None:
        while len(self._tiers) <= tier:
            self._tiers.append(set())

    def add_to_tier(self, tier: int, spec: str) -> None:
        """Add a variable, or every current variable matching a wildcard spec, to tier."""
        if tier < 0:
            raise ValueError(f"Tier index must be non-negative, got {tier}")
        if spec is None:
            raise TypeError("Tier spec must not be None")

        self._add_literal(spec)
        self._ensure_tiers(tier)
        self._tiers[tier].update(self._get_extent(spec))

    def add_to_tiers_by_var_names(self, names: Iterable[str]) -> None:
        """Put each variable named like 'xxx:tN' into tier N."""
        names = list(names)
        for name in names:
            self.add_variable(name)
        for name in names:
            index = name.rfind(":t")
            if index >= 0:
                self.add_to_tier(int(name[index + 2:]), name)

    def set_tier(self, tier: int, names: Iterable[str]) -> None:
        self._ensure_tiers(tier)
        self._tiers[tier].clear()
        for name in names:
            self.add_to_tier(tier, name)

    def get_tier(self, tier: int) -> List[str]:
        if tier < 0:
            raise ValueError(f"Tier index must be non-negative, got {tier}")
        if tier >= len(self._tiers):
            return []
        return sorted(self._tiers[tier])

    def get_num_tiers(self) -> int:
        return len(self._tiers)

    def remove_from_tiers(self, spec: str) -> None:
        if spec is None:
            raise TypeError("Tier spec must not be None")
        extent = self._get_extent(spec)
        for tier in self._tiers:
            tier.difference_update(extent)

    def get_variables_not_in_tiers(self) -> List[str]:
        in_tiers = set().union(*self._tiers) if self._tiers else set()
        return sorted(self._variables - in_tiers)

    def is_in_which_tier(self, name: str) -> int:
        """Index of the first tier containing name, or -1."""
        for i, tier in enumerate(self._tiers):
            if name in tier:
                return i
        return -1

    def set_tier_forbidden_within(self, tier: int, forbidden: bool) -> None:
        """Forbid (or allow again) edges between variables of the same tier."""
        self._ensure_tiers(tier)
        if forbidden:
            self._tiers_forbidden_within.add(tier)
        else:
            self._tiers_forbidden_within.discard(tier)

    def is_tier_forbidden_within(self, tier: int) -> bool:
        if tier >= len(self._tiers) or not self._tiers[tier]:
            return False
        return tier in self._tiers_forbidden_within

    def get_max_tier_forbidden_within(self) -> int:
        for tier in range(len(self._tiers) - 1, -1, -1):
            if self.is_tier_forbidden_within(tier):
                return tier
        return -1

    def set_only_can_cause_next_tier(self, tier: int, only_next: bool) -> None:
        """Restrict tier so that its variables may only cause variables in tier + 1."""
        self._ensure_tiers(tier)
        if only_next:
            self._tiers_only_cause_next.add(tier)
        else:
            self._tiers_only_cause_next.discard(tier)

    def is_only_can_cause_next_tier(self, tier: int) -> bool:
        if tier >= len(self._tiers) or not self._tiers[tier]:
            return False
        if tier + 2 >= len(self._tiers):
            return False
        return tier in self._tiers_only_cause_next

    def _tiers_of(self, name: str) -> List[int]:
        return [i for i, tier in enumerate(self._tiers) if name in tier]

    def _tier_forbids(self, i: int, j: int) -> bool:
        """Whether tier rules forbid an edge from a variable in tier i into one in tier j."""
        if i > j:
            return True
        if i == j:
            return i in self._tiers_forbidden_within
        return i in self._tiers_only_cause_next and j >= i + 2

    def _forbidden_tier_rules(self) -> List[Rule]:
        rules = []
        for i, tier_i in enumerate(self._tiers):
            for j, tier_j in enumerate(self._tiers):
                if self._tier_forbids(i, j):
                    rules.append((frozenset(tier_i), frozenset(tier_j)))
        return rules

    # Rules

    def set_forbidden(self, var1: str, var2: str) -> None:
        """Forbid var1 --> var2. Either side may be a wildcard spec; no-op if already forbidden."""
        if self.is_forbidden(var1, var2):
            return

        self._add_literal(var1)
        self._add_literal(var2)
        rule = (self._get_extent(var1), self._get_extent(var2))
        if rule not in self._forbidden_rules:
            self._forbidden_rules.append(rule)

    def remove_forbidden(self, var1: str, var2: str) -> None:
        rule = (self._get_extent(var1), self._get_extent(var2))
        self._forbidden_rules = [r for r in self._forbidden_rules if r != rule]

    def set_required(self, var1: str, var2: str) -> None:
        """Require var1 --> var2. Either side may be a wildcard spec; repeated calls add one rule."""
        self._add_literal(var1)
        self._add_literal(var2)
        rule = (self._get_extent(var1), self._get_extent(var2))
        if rule not in self._required_rules:
            self._required_rules.append(rule)

    def remove_required(self, var1: str, var2: str) -> None:
        rule = (self._get_extent(var1), self._get_extent(var2))
        self._required_rules = [r for r in self._required_rules if r != rule]

    @staticmethod
    def _matches(rules: Iterable[Rule], var1: str, var2: str) -> bool:
        return var1 != var2 and any(var1 in first and var2 in second for first, second in rules)

    def is_forbidden_by_rules(self, var1: str, var2: str) -> bool:
        return self._matches(self._forbidden_rules, var1, var2)

    def is_forbidden_by_tiers(self, var1: str, var2: str) -> bool:
        """Whether the tier ordering alone forbids var1 --> var2."""
        if var1 == var2:
            return False
        return any(self._tier_forbids(i, j) for i in self._tiers_of(var1) for j in self._tiers_of(var2))

    def is_forbidden(self, var1: str, var2: str) -> bool:
        """Whether var1 --> var2 is forbidden. Required edges are never forbidden."""
        if self.is_required(var1, var2):
            return False
        return self.is_forbidden_by_rules(var1, var2) or self.is_forbidden_by_tiers(var1, var2)

    def is_required(self, var1: str, var2: str) -> bool:
        return self._matches(self._required_rules, var1, var2)

    def no_edge_required(self, x: str, y: str) -> bool:
        return not (self.is_required(x, y) or self.is_required(y, x))

    def is_violated_by(self, graph: Graph) -> bool:
        """True if some directed edge tail --> head of graph is forbidden."""
        if graph is None:
            raise ValueError("A graph must be provided")
        for edge in graph.get_edges():
            if is_directed_edge(edge) and self.is_forbidden(get_directed_edge_tail(edge).name,
                                                            get_directed_edge_head(edge).name):
                return True
        return False

    def is_empty(self) -> bool:
        return not self._forbidden_rules and not self._required_rules and not self._tiers

    def clear(self) -> None:
        """Drop variables, rules and tiers."""
        self._variables.clear()
        self._forbidden_rules.clear()
        self._required_rules.clear()
        self._tiers.clear()
        self._tiers_forbidden_within.clear()
        self._tiers_only_cause_next.clear()
        self._knowledge_groups.clear()
        self._group_rules.clear()

    # Legacy knowledge groups

    def _group_rule(self, group: KnowledgeGroup) -> Rule:
        first = frozenset().union(*(self._get_extent(s) for s in group.from_variables))
        second = frozenset().union(*(self._get_extent(s) for s in group.to_variables))
        return first, second

    def _rules_for(self, group: KnowledgeGroup) -> List[Rule]:
        return self._forbidden_rules if group.type == KnowledgeGroupType.FORBIDDEN else self._required_rules

    def add_knowledge_group(self, group: KnowledgeGroup) -> None:
        rule = self._group_rule(group)
        self._knowledge_groups.append(group)
        self._group_rules.append(rule)
        self._rules_for(group).append(rule)

    def set_knowledge_group(self, index: int, group: KnowledgeGroup) -> None:
        old_group, old_rule = self._knowledge_groups[index], self._group_rules[index]
        self._rules_for(old_group).remove(old_rule)
        rule = self._group_rule(group)
        self._knowledge_groups[index] = group
        self._group_rules[index] = rule
        self._rules_for(group).append(rule)

    def remove_knowledge_group(self, index: int) -> None:
        group = self._knowledge_groups.pop(index)
        rule = self._group_rules.pop(index)
        self._rules_for(group).remove(rule)

    def get_knowledge_groups(self) -> List[KnowledgeGroup]:
        return list(self._knowledge_groups)

    def _matches_groups(self, group_type: KnowledgeGroupType, var1: str, var2: str) -> bool:
        rules = [self._group_rule(g) for g in self._knowledge_groups if g.type == group_type]
        return any(var1 in first and var2 in second for first, second in rules)

    def is_forbidden_by_groups(self, var1: str, var2: str) -> bool:
        return self._matches_groups(KnowledgeGroupType.FORBIDDEN, var1, var2)

    def is_required_by_groups(self, var1: str, var2: str) -> bool:
        return self._matches_groups(KnowledgeGroupType.REQUIRED, var1, var2)

    # Edge listings

    @staticmethod
    def _expand(rules: Iterable[Rule]) -> List[KnowledgeEdge]:
        edges = {KnowledgeEdge(a, b) for first, second in rules for a in first for b in second if a != b}
        return sorted(edges)

    def get_list_of_forbidden_edges(self) -> List[KnowledgeEdge]:
        """Every forbidden pair: explicit, group and tier rules."""
        return self._expand(self._forbidden_rules + self._forbidden_tier_rules())

    def get_list_of_explicitly_forbidden_edges(self) -> List[KnowledgeEdge]:
        explicit = [r for r in self._forbidden_rules if r not in self._group_rules]
        return self._expand(explicit)

    def get_list_of_required_edges(self) -> List[KnowledgeEdge]:
        return self._expand(self._required_rules)

    def get_list_of_explicitly_required_edges(self) -> List[KnowledgeEdge]:
        explicit = [r for r in self._required_rules if r not in self._group_rules]
        return self._expand(explicit)

    # Copying, comparison, rendering

    def copy(self) -> "Knowledge":
        """Structural clone; the copy shares no mutable state with this object."""
        other = Knowledge()
        other._variables = set(self._variables)
        other._forbidden_rules = list(self._forbidden_rules)
        other._required_rules = list(self._required_rules)
        other._tiers = [set(tier) for tier in self._tiers]
        other._tiers_forbidden_within = set(self._tiers_forbidden_within)
        other._tiers_only_cause_next = set(self._tiers_only_cause_next)
        other._knowledge_groups = [g.copy() for g in self._knowledge_groups]
        other._group_rules = list(self._group_rules)
        other.default_to_knowledge_layout = self.default_to_knowledge_layout
        return other

    def __eq__(self, other):
        if not isinstance(other, Knowledge):
            return False
        return (self._forbidden_rules == other._forbidden_rules
                and self._required_rules == other._required_rules
                and self._tiers == other._tiers
                and self._tiers_forbidden_within == other._tiers_forbidden_within
                and self._tiers_only_cause_next == other._tiers_only_cause_next)

    __hash__ = None

    def __str__(self):
        lines = ["/knowledge", "addtemporal"]
        for i, tier in enumerate(self._tiers):
            marker = "*" if self.is_tier_forbidden_within(i) else ""
            lines.append(f"{i + 1}{marker} " + " ".join(sorted(tier)))
        lines.append("")
        lines.append("forbiddirect")
        lines.extend(f"{e.from_name} {e.to_name}" for e in self.get_list_of_explicitly_forbidden_edges())
        lines.append("")
        lines.append("requiredirect")
        lines.extend(f"{e.from_name} {e.to_name}" for e in self.get_list_of_explicitly_required_edges())
        return "\n".join(lines) + "\n"
