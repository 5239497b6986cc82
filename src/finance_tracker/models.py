import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Health & Fitness",
    "Travel",
    "Education",
    "Business",
    "Personal Care",
    "Gifts & Donations",
    "Investments",
    "Other",
)

DEFAULT_CATEGORY = "Other"

TransactionType = Literal["income", "expense"]
BudgetStatus = Literal["success", "warning", "danger"]


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Transaction(CamelModel):
    id: str
    amount: float
    date: dt.date
    description: str
    category: str = DEFAULT_CATEGORY
    type: TransactionType
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class Budget(CamelModel):
    id: str
    category: str
    amount: float
    month: str
    year: int
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class MonthlyExpense(CamelModel):
    month: str
    amount: float


class CategoryExpense(CamelModel):
    category: str
    amount: float
    percentage: int


class Analytics(CamelModel):
    monthly_expenses: list[MonthlyExpense]
    category_breakdown: list[CategoryExpense]
    recent_transactions: list[Transaction]
    total_transactions: int
    total_expenses: float
    total_income: float


class BudgetProgress(CamelModel):
    budget_id: str
    category: str
    budget: float
    spent: float
    remaining: float
    percentage: float
    status: BudgetStatus


class BudgetOverview(CamelModel):
    month: str
    year: int
    items: list[BudgetProgress]
    total_budget: float
    total_spent: float
    percentage: float
    status: BudgetStatus
