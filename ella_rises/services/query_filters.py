"""Helpers that turn list-page query-string parameters into SQLAlchemy clauses.

Every multi-select filter on the dashboard pages follows the same rule: a
missing value, or any selection containing ``"all"``, means the dimension is
not filtered at all.
"""
from decimal import Decimal, InvalidOperation

from sqlalchemy import Text, and_, cast, extract, or_

ALL = "all"
FULL_NAME = "full_name"


def param_to_array(value):
    """Normalize a query-string value to a list, defaulting to ``["all"]``."""
    if not value:
        return [ALL]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def read_array(args, name):
    """Read a possibly repeated query-string parameter as a filter array."""
    if hasattr(args, "getlist"):
        values = args.getlist(name) or args.getlist(f"{name}[]")
        return param_to_array(values)
    return param_to_array(args.get(name))


def is_unfiltered(values):
    return ALL in values


def parse_ints(values):
    numbers = []
    for value in values:
        try:
            numbers.append(int(str(value).strip()))
        except (TypeError, ValueError):
            continue
    return numbers


def parse_numbers(values, max_integer_digits=15):
    """Parse decimal filter values, dropping anything a column could not hold.

    Values with ``max_integer_digits`` or more digits before the point are
    discarded before any conversion.
    """
    numbers = []
    for value in values:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            continue
        if not number.is_finite() or number.adjusted() >= max_integer_digits:
            continue
        numbers.append(number)
    # Integral values stay ints so they bind against integer columns
    return [
        int(number) if number == number.to_integral_value() else float(number)
        for number in numbers
    ]


def full_name_clause(first_name_column, last_name_column, term):
    """Match a free-text name against first and last name columns.

    A single word may appear in either column. With several words the first
    is matched against the first name and the last against the last name;
    anything in between is ignored.
    """
    parts = term.split()
    if not parts:
        return None
    if len(parts) == 1:
        like_one = f"%{parts[0]}%"
        return or_(
            first_name_column.ilike(like_one), last_name_column.ilike(like_one)
        )
    return and_(
        first_name_column.ilike(f"%{parts[0]}%"),
        last_name_column.ilike(f"%{parts[-1]}%"),
    )


def text_search_clause(column, term):
    return cast(column, Text).ilike(f"%{term}%")


def in_clause(column, values):
    if is_unfiltered(values):
        return None
    return column.in_(values)


def int_in_clause(column, values):
    if is_unfiltered(values):
        return None
    numbers = parse_ints(values)
    if not numbers:
        return None
    return column.in_(numbers)


def number_in_clause(column, values):
    """IN filter on a Numeric column, bounded by the column's precision."""
    if is_unfiltered(values):
        return None
    precision = getattr(column.type, "precision", None)
    if precision:
        numbers = parse_numbers(values, precision - (column.type.scale or 0))
    else:
        numbers = parse_numbers(values)
    if not numbers:
        return None
    return column.in_(numbers)


def flag_in_clause(column, values):
    """Filter a boolean column from ``0``/``1`` selections."""
    if is_unfiltered(values):
        return None
    flags = {bool(number) for number in parse_ints(values)}
    if not flags:
        return None
    return column.in_(sorted(flags))


def presence_clause(column, values):
    """Yes/No filter on an amount: "Yes" means positive, "No" means zero or NULL."""
    if is_unfiltered(values):
        return None
    wants_yes = "Yes" in values
    wants_no = "No" in values
    if wants_yes and not wants_no:
        return column > 0
    if wants_no and not wants_yes:
        return or_(column == 0, column.is_(None))
    return None


def date_part_clause(part, column, values):
    if is_unfiltered(values):
        return None
    numbers = parse_ints(values)
    if not numbers:
        return None
    return extract(part, column).in_(numbers)


def normalize_sort_order(order):
    return "desc" if order == "desc" else "asc"


def order_clause(column, order):
    return column.desc() if order == "desc" else column.asc()
