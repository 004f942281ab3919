"""Static keyword and function vocabularies for each query dialect."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

from .models import Dialect, SuggestionCategory, SuggestionItem


@dataclass(frozen=True, slots=True)
class FunctionEntry:
    """Function surfaced to the editor with an optional argument template."""

    name: str
    arity: int = 0
    template: str | None = None
    documentation: str | None = None

    def insert_text(self) -> str:
        if self.template:
            return self.template
        if self.arity == 1:
            return f"{self.name}($1)"
        if self.arity >= 2:
            return f"{self.name}($1, $2)"
        return f"{self.name}()"


class DialectVocabulary:
    """Keyword and function lists for a single dialect."""

    def __init__(self, keywords: Sequence[str], functions: Sequence[FunctionEntry]) -> None:
        self._keywords = tuple(keywords)
        self._functions = tuple(functions)

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

    @property
    def functions(self) -> tuple[FunctionEntry, ...]:
        return self._functions

    def keyword_items(self, detail: str) -> list[SuggestionItem]:
        return [
            SuggestionItem.build(
                keyword,
                SuggestionCategory.KEYWORD,
                detail=detail,
                documentation=f"Keyword: {keyword}",
            )
            for keyword in self._keywords
        ]

    def function_items(self, detail: str) -> list[SuggestionItem]:
        return [
            SuggestionItem.build(
                entry.name,
                SuggestionCategory.FUNCTION,
                detail=detail,
                documentation=entry.documentation or f"Function: {entry.name}",
                insert_text=entry.insert_text(),
            )
            for entry in self._functions
        ]


def vocabulary_for(dialect: Dialect | str) -> DialectVocabulary:
    """Return the vocabulary for a dialect, using generic SQL for unknown names."""

    return _VOCABULARIES[Dialect.parse(dialect)]


# Keyword-like identifiers that schema commands occasionally return as names.
RESERVED_WORDS: frozenset[str] = frozenset(
    {
        "FROM", "SELECT", "WHERE", "GROUP", "ORDER", "BY", "LIMIT", "OFFSET",
        "SHOW", "MEASUREMENTS", "SERIES", "DATABASES", "FIELD", "KEYS", "TAG",
        "VALUES", "CREATE", "DROP", "ALTER", "INSERT", "UPDATE", "DELETE",
        "INTO", "JOIN", "AS", "ON", "AND", "OR", "NOT", "HAVING", "TABLES",
        "TIMESERIES", "DEVICES",
    }
)


def is_reserved(name: str) -> bool:
    return name.strip().upper() in RESERVED_WORDS


def _aggregate(name: str, doc: str) -> FunctionEntry:
    return FunctionEntry(name, arity=1, documentation=doc)


def _selector(name: str, doc: str) -> FunctionEntry:
    return FunctionEntry(name, arity=2, documentation=doc)


INFLUXQL_KEYWORDS: Tuple[str, ...] = (
    "SELECT", "FROM", "WHERE", "GROUP BY", "ORDER BY", "LIMIT", "OFFSET",
    "SLIMIT", "SOFFSET", "SHOW", "DATABASES", "MEASUREMENTS", "SERIES",
    "FIELD", "KEYS", "TAG", "VALUES", "RETENTION", "POLICIES", "CONTINUOUS",
    "QUERIES", "USERS", "CREATE", "DROP", "ALTER", "GRANT", "REVOKE", "AND",
    "OR", "NOT", "LIKE", "REGEXP", "IN", "BETWEEN", "IS", "NULL", "ASC",
    "DESC", "DISTINCT", "AS", "INTO", "FILL", "TIME", "NOW", "TZ",
)

INFLUXQL_FUNCTIONS: Tuple[FunctionEntry, ...] = (
    _aggregate("COUNT", "Number of non-null field values."),
    _aggregate("DISTINCT", "List of unique field values."),
    _aggregate("INTEGRAL", "Area under the curve of field values."),
    _aggregate("MEAN", "Arithmetic mean of field values."),
    _aggregate("MEDIAN", "Middle value of sorted field values."),
    _aggregate("MODE", "Most frequent field value."),
    _aggregate("SPREAD", "Difference between the largest and smallest value."),
    _aggregate("STDDEV", "Standard deviation of field values."),
    _aggregate("SUM", "Sum of field values."),
    _selector("BOTTOM", "Smallest N field values."),
    _aggregate("FIRST", "Field value with the oldest timestamp."),
    _aggregate("LAST", "Field value with the most recent timestamp."),
    _aggregate("MAX", "Greatest field value."),
    _aggregate("MIN", "Lowest field value."),
    _selector("PERCENTILE", "Nth percentile of field values."),
    _selector("SAMPLE", "Random sample of N field values."),
    _selector("TOP", "Greatest N field values."),
    _aggregate("ABS", "Absolute value."),
    FunctionEntry("ACOS"),
    FunctionEntry("ASIN"),
    FunctionEntry("ATAN"),
    FunctionEntry("ATAN2"),
    FunctionEntry("CEIL"),
    FunctionEntry("COS"),
    _aggregate("CUMULATIVE_SUM", "Running total of field values."),
    _aggregate("DERIVATIVE", "Rate of change between subsequent values."),
    _aggregate("DIFFERENCE", "Difference between subsequent values."),
    FunctionEntry("EXP"),
    FunctionEntry("FLOOR"),
    FunctionEntry("HISTOGRAM"),
    FunctionEntry("LN"),
    FunctionEntry("LOG"),
    FunctionEntry("LOG2"),
    FunctionEntry("LOG10"),
    _selector("MOVING_AVERAGE", "Rolling average over N values."),
    _aggregate("NON_NEGATIVE_DERIVATIVE", "Non-negative rate of change."),
    _aggregate("NON_NEGATIVE_DIFFERENCE", "Non-negative difference between values."),
    FunctionEntry("POW"),
    FunctionEntry("ROUND"),
    FunctionEntry("SIN"),
    FunctionEntry("SQRT"),
    FunctionEntry("TAN"),
    FunctionEntry("HOLT_WINTERS"),
    FunctionEntry("CHANDE_MOMENTUM_OSCILLATOR"),
    FunctionEntry("EXPONENTIAL_MOVING_AVERAGE"),
    FunctionEntry("DOUBLE_EXPONENTIAL_MOVING_AVERAGE"),
    FunctionEntry("KAUFMANS_EFFICIENCY_RATIO"),
    FunctionEntry("KAUFMANS_ADAPTIVE_MOVING_AVERAGE"),
    FunctionEntry("TRIPLE_EXPONENTIAL_MOVING_AVERAGE"),
    FunctionEntry("TRIPLE_EXPONENTIAL_DERIVATIVE"),
    FunctionEntry("RELATIVE_STRENGTH_INDEX"),
)

FLUX_KEYWORDS: Tuple[str, ...] = (
    "import", "option", "return", "if", "then", "else", "and", "or", "not",
    "exists", "bucket", "start", "stop", "fn", "tables",
)

FLUX_FUNCTIONS: Tuple[FunctionEntry, ...] = (
    FunctionEntry("from", template='from(bucket: "$1")', documentation="Read data from a bucket."),
    FunctionEntry("range", template="range(start: $1)", documentation="Filter records by time range."),
    FunctionEntry("filter", template="filter(fn: (r) => $1)", documentation="Keep records matching a predicate."),
    FunctionEntry("group", template="group(columns: [$1])", documentation="Regroup tables by columns."),
    FunctionEntry("sort", template="sort(columns: [$1])", documentation="Sort records by columns."),
    FunctionEntry("limit", template="limit(n: $1)", documentation="Keep the first N records of each table."),
    FunctionEntry("map", template="map(fn: (r) => ($1))", documentation="Rewrite each record."),
    FunctionEntry("reduce"),
    FunctionEntry(
        "aggregateWindow",
        template="aggregateWindow(every: $1, fn: $2)",
        documentation="Aggregate values into time windows.",
    ),
    FunctionEntry("mean", documentation="Average of non-null values."),
    FunctionEntry("sum"),
    FunctionEntry("count"),
    FunctionEntry("min"),
    FunctionEntry("max"),
    FunctionEntry("first"),
    FunctionEntry("last"),
    FunctionEntry("median"),
    FunctionEntry("mode"),
    FunctionEntry("stddev"),
    FunctionEntry("derivative"),
    FunctionEntry("difference"),
    FunctionEntry("increase"),
    FunctionEntry("rate"),
    FunctionEntry("histogram"),
    FunctionEntry("quantile"),
    FunctionEntry("skew"),
    FunctionEntry("spread"),
    FunctionEntry("covariance"),
    FunctionEntry("correlation"),
    FunctionEntry("pearsonr"),
    FunctionEntry("join"),
    FunctionEntry("union"),
    FunctionEntry("pivot"),
    FunctionEntry("duplicate"),
    FunctionEntry("drop", template="drop(columns: [$1])"),
    FunctionEntry("keep", template="keep(columns: [$1])"),
    FunctionEntry("rename"),
    FunctionEntry("set"),
    FunctionEntry("toString"),
    FunctionEntry("toInt"),
    FunctionEntry("toFloat"),
    FunctionEntry("toBool"),
    FunctionEntry("toTime"),
    FunctionEntry("yield", template='yield(name: "$1")'),
    FunctionEntry("debug"),
    FunctionEntry("elapsed"),
    FunctionEntry("timeShift", template="timeShift(duration: $1)"),
    FunctionEntry("fill"),
    FunctionEntry("interpolate"),
    FunctionEntry("window", template="window(every: $1)"),
    FunctionEntry("cumulativeSum"),
    FunctionEntry("movingAverage", template="movingAverage(n: $1)"),
    FunctionEntry("exponentialMovingAverage"),
    FunctionEntry("doubleEMA"),
    FunctionEntry("tripleEMA"),
    FunctionEntry("kaufmansER"),
    FunctionEntry("kaufmansAMA"),
    FunctionEntry("relativeStrengthIndex"),
    FunctionEntry("chandeMomentumOscillator"),
)

SQL_KEYWORDS: Tuple[str, ...] = (
    "SELECT", "FROM", "WHERE", "GROUP BY", "HAVING", "ORDER BY", "LIMIT",
    "OFFSET", "JOIN", "INNER JOIN", "LEFT JOIN", "RIGHT JOIN", "FULL JOIN",
    "UNION", "UNION ALL", "INTERSECT", "EXCEPT", "CREATE", "ALTER", "DROP",
    "INSERT", "UPDATE", "DELETE", "TRUNCATE", "INDEX", "VIEW", "DATABASE",
    "TABLE", "COLUMN", "AND", "OR", "NOT", "IN", "EXISTS", "BETWEEN", "LIKE",
    "IS", "NULL", "DISTINCT", "AS", "CASE", "WHEN", "THEN", "ELSE", "END",
    "ASC", "DESC", "SHOW", "TABLES", "COLUMNS",
)

SQL_FUNCTIONS: Tuple[FunctionEntry, ...] = (
    _aggregate("COUNT", "Number of rows or non-null values."),
    _aggregate("SUM", "Total of a numeric column."),
    _aggregate("AVG", "Average of a numeric column."),
    _aggregate("MIN", "Smallest value of a column."),
    _aggregate("MAX", "Largest value of a column."),
    _aggregate("DISTINCT", "Unique values of a column."),
    FunctionEntry("NOW", documentation="Current timestamp."),
    _selector("DATE_BIN", "Bucket timestamps into fixed intervals."),
    _selector("DATE_TRUNC", "Truncate a timestamp to a unit."),
    FunctionEntry("COALESCE"),
)

IOTDB_KEYWORDS: Tuple[str, ...] = (
    "SELECT", "FROM", "WHERE", "GROUP BY", "ORDER BY", "LIMIT", "OFFSET",
    "SLIMIT", "SOFFSET", "SHOW", "TIMESERIES", "DEVICES", "DATABASES",
    "STORAGE GROUP", "CHILD PATHS", "CREATE", "DROP", "INSERT", "DELETE",
    "AND", "OR", "NOT", "IN", "LIKE", "FILL", "ALIGN BY DEVICE",
    "WITHOUT NULL", "LEVEL", "TIME", "TIMESTAMP", "VALUES", "INTO",
)

IOTDB_FUNCTIONS: Tuple[FunctionEntry, ...] = (
    _aggregate("COUNT", "Number of data points."),
    _aggregate("AVG", "Average of data points."),
    _aggregate("SUM", "Sum of data points."),
    _aggregate("MAX_VALUE", "Largest value."),
    _aggregate("MIN_VALUE", "Smallest value."),
    _aggregate("FIRST_VALUE", "Value with the oldest timestamp."),
    _aggregate("LAST_VALUE", "Value with the newest timestamp."),
    _aggregate("MAX_TIME", "Newest timestamp."),
    _aggregate("MIN_TIME", "Oldest timestamp."),
    _aggregate("EXTREME", "Value with the largest absolute magnitude."),
    _aggregate("STDDEV", "Standard deviation."),
)


_VOCABULARIES: Mapping[Dialect, DialectVocabulary] = {
    Dialect.INFLUXQL: DialectVocabulary(INFLUXQL_KEYWORDS, INFLUXQL_FUNCTIONS),
    Dialect.FLUX: DialectVocabulary(FLUX_KEYWORDS, FLUX_FUNCTIONS),
    Dialect.SQL: DialectVocabulary(SQL_KEYWORDS, SQL_FUNCTIONS),
    Dialect.IOTDB: DialectVocabulary(IOTDB_KEYWORDS, IOTDB_FUNCTIONS),
}


__all__ = [
    "DialectVocabulary",
    "FunctionEntry",
    "RESERVED_WORDS",
    "is_reserved",
    "vocabulary_for",
]
