"""Model name to table name mapping."""

import re
from typing import Type, Union

_UPPERCASE = re.compile(r'[A-Z]')


def model_to_table(model: Union[str, Type]) -> str:
    """Derive a snake_case table name from a PascalCase model name.

    Any dotted module qualifier is stripped first, so ``'app.models.UserAccount'``
    and ``UserAccount`` both map to ``'user_account'``.

    Args:
        model: Model class, or its (optionally qualified) name

    Returns:
        Table name

    Raises:
        ValueError: If the unqualified name does not start with an uppercase letter
    """
    name = model if isinstance(model, str) else model.__name__
    name = name.rsplit('.', 1)[-1]

    if not _UPPERCASE.match(name):
        raise ValueError(f"Model name must be PascalCase, got {name!r}")

    return _UPPERCASE.sub(lambda m: '_' + m.group(0), name).lower()[1:]
