from typing import Any

from pydantic import BaseModel


# Loose types on purpose: values are checked by the domain validators so that
# every problem is reported together instead of a single 422.
class TransactionPayload(BaseModel):
    amount: Any = None
    date: Any = None
    description: Any = None
    type: Any = None
    category: Any = None


class BudgetPayload(BaseModel):
    category: Any = None
    amount: Any = None
    month: Any = None
    year: Any = None
