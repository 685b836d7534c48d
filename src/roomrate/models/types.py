"""Shared field types."""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Decimal amounts are emitted as JSON numbers rather than strings
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
