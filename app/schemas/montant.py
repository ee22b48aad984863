"""
Type commun des montants en FCFA.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer


# Les montants sortent en nombres JSON, comme dans les indicateurs
# calculés (jsonable_encoder).
Montant = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
