"""Declarative query specifications binding a data-source query to a metric family"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple
from metrics.models import MetricType
from .errors import QuerySpecError


def identity(value: float) -> float:
    return value


@dataclass(frozen=True)
class QuerySpec:
    """Immutable description of one query and how its rows map to a metric

    Attributes:
        target_metric: Gauge family handle the rows are published to
        metric_kind: Kind of the target metric
        value_transform: Applied to raw numeric values before publishing
        source_query: WMI class queried (e.g. Win32_Service)
        source_filter: Raw WQL predicate supplied by the operator
        label_keys: Property names whose values form the label tuple
        scope_filter: Additional clause built from include/exclude rules
    """
    target_metric: Any
    metric_kind: MetricType
    value_transform: Callable[[float], float]
    source_query: str
    source_filter: Optional[str]
    label_keys: Tuple[str, ...]
    scope_filter: Optional[str] = None

    def validate(self):
        """Check that the label plan matches the target metric's label arity"""
        arity = getattr(self.target_metric, "arity", None)
        if arity is None:
            raise QuerySpecError(f"Target metric for {self.source_query} has no label arity")
        if len(self.label_keys) != arity:
            raise QuerySpecError(
                f"Query on {self.source_query} yields {len(self.label_keys)} labels "
                f"but {getattr(self.target_metric, 'full_name', 'metric')} expects {arity}"
            )

    def to_wql(self) -> str:
        """Render the WQL statement executed against the data source"""
        query = f"SELECT * FROM {self.source_query}"
        clauses = [c.strip() for c in (self.source_filter, self.scope_filter) if c and c.strip()]
        if len(clauses) == 1:
            query += f" WHERE {clauses[0]}"
        elif clauses:
            query += " WHERE " + " AND ".join(f"({c})" for c in clauses)
        return query


def build_query_spec(metric_handle, metric_kind: MetricType, raw_query: str, filter: Optional[str],
                     label_keys: Sequence[str], value_transform: Callable[[float], float] = identity,
                     scope_filter: Optional[str] = None) -> QuerySpec:
    """Build a query spec. Validation is deferred to first use."""
    return QuerySpec(
        target_metric=metric_handle,
        metric_kind=metric_kind,
        value_transform=value_transform,
        source_query=raw_query,
        source_filter=filter or None,
        label_keys=tuple(label_keys),
        scope_filter=scope_filter or None,
    )


def _quote(pattern: str) -> str:
    escaped = pattern.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def build_scope_clause(include: Optional[Sequence[Tuple[str, str]]] = None,
                       exclude: Optional[Sequence[Tuple[str, str]]] = None) -> Optional[str]:
    """Build a WQL clause from include and exclude LIKE patterns

    Rules are (property, pattern) pairs and a property may repeat. Include
    rules match if any of them matches; exclude rules must all fail.
    """
    parts = []

    if include:
        matches = [f"{prop} LIKE {_quote(pattern)}" for prop, pattern in include]
        parts.append(matches[0] if len(matches) == 1 else "(" + " OR ".join(matches) + ")")

    if exclude:
        parts.extend(f"NOT {prop} LIKE {_quote(pattern)}" for prop, pattern in exclude)

    if not parts:
        return None
    return " AND ".join(parts)
