from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Transaction:
    id: str
    user_id: str
    amount: float
    type: str               # 'income' | 'expense'
    category: str           # category name, not an id
    description: str = ""
    date: datetime = field(default_factory=datetime.now)
    month: int = 0          # 1-12; 0 on legacy records
    year: int = 0           # 0 on legacy records
