"""
Builders for parameterized SQL fragments.

Both builders are pure: they return the SQL text of a fragment together
with the values for its `$n` placeholders, and leave binding to
jobly.core.database.execute. Values are never written into the SQL text.

    >>> build_update_clause({"name": "Acme", "numEmployees": 5}, {"numEmployees": "num_employees"})
    SqlFragment(clause='"name"=$1, "num_employees"=$2', values=('Acme', 5))

    >>> build_filter_clause({"minSalary": 50000}, FilterSet({"minSalary": at_least("salary")}))
    SqlFragment(clause='salary >= $1', values=(50000,))
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, NamedTuple, Sequence, Tuple

from jobly.core.exceptions import BadRequestError


class SqlFragment(NamedTuple):
    """SQL text plus the values for its placeholders, in placeholder order."""
    clause: str
    values: Tuple[Any, ...]


# (placeholder index, filter value) -> (predicate SQL, value to bind)
Predicate = Callable[[int, Any], Tuple[str, Any]]

# Checks the whole criteria mapping before any predicate is built
Rule = Callable[[Mapping[str, Any]], None]


def build_update_clause(data: Mapping[str, Any], column_map: Mapping[str, str]) -> SqlFragment:
    """
    Build the SET list of a partial UPDATE.

    Args:
        data: Fields to change, in the order they should be assigned
        column_map: Field name -> column name; fields missing from the map
            are used as the column name verbatim

    Returns:
        SqlFragment such as ('"first_name"=$1, "age"=$2', ('Aliya', 32))

    Raises:
        BadRequestError: If data is empty
    """
    if not data:
        raise BadRequestError("No data")

    # {firstName: 'Aliya', age: 32} => ['"first_name"=$1', '"age"=$2']
    columns = [
        f'"{column_map.get(key, key)}"=${index}'
        for index, key in enumerate(data, start=1)
    ]

    return SqlFragment(", ".join(columns), tuple(data.values()))


# Predicate templates

def contains(column: str) -> Predicate:
    """Case-insensitive substring match."""
    def predicate(index: int, value: Any) -> Tuple[str, Any]:
        return f"{column} ILIKE '%' || ${index} || '%'", value
    return predicate


def at_least(column: str) -> Predicate:
    def predicate(index: int, value: Any) -> Tuple[str, Any]:
        return f"{column} >= ${index}", value
    return predicate


def at_most(column: str) -> Predicate:
    def predicate(index: int, value: Any) -> Tuple[str, Any]:
        return f"{column} <= ${index}", value
    return predicate


def has_positive(column: str) -> Predicate:
    """
    Boolean filter on a numeric column compared against zero.

    true selects rows where the column is strictly positive, false rows
    where it is exactly zero. NULL matches neither. The bound value is the
    literal 0, not the boolean.
    """
    def predicate(index: int, value: Any) -> Tuple[str, Any]:
        if value is True:
            return f"{column} > ${index}", 0
        if value is False:
            return f"{column} = ${index}", 0
        raise BadRequestError(f"Expected true or false, got {value!r}")
    return predicate


def range_rule(low_key: str, high_key: str, message: str) -> Rule:
    """Reject criteria whose lower bound exceeds its upper bound."""
    def rule(criteria: Mapping[str, Any]) -> None:
        if low_key not in criteria or high_key not in criteria:
            return
        try:
            inverted = criteria[low_key] > criteria[high_key]
        except TypeError:
            raise BadRequestError(f"{low_key} and {high_key} must be comparable")
        if inverted:
            raise BadRequestError(message)
    return rule


@dataclass(frozen=True)
class FilterSet:
    """The search filters one resource accepts."""
    predicates: Dict[str, Predicate]
    rules: Sequence[Rule] = field(default_factory=tuple)


def build_filter_clause(criteria: Mapping[str, Any], filters: FilterSet) -> SqlFragment:
    """
    Build the body of a WHERE clause from search criteria.

    Args:
        criteria: Filter name -> value; every name must be in `filters`
        filters: Allowed filters and cross-field rules for the resource

    Returns:
        SqlFragment with predicates joined by AND, one placeholder per key,
        numbered in the iteration order of `criteria`

    Raises:
        BadRequestError: If criteria is empty, breaks a rule, names an
            unknown filter, or holds a value a predicate rejects
    """
    if not criteria:
        raise BadRequestError("No data")

    for rule in filters.rules:
        rule(criteria)

    predicates = []
    values = []
    for index, (name, value) in enumerate(criteria.items(), start=1):
        template = filters.predicates.get(name)
        if template is None:
            raise BadRequestError("Invalid search criteria")
        sql, bound = template(index, value)
        predicates.append(sql)
        values.append(bound)

    return SqlFragment(" AND ".join(predicates), tuple(values))
