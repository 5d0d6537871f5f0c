from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class PaymentDTO:
    id: int
    order_id: int
    total: Decimal
    currency: str
    method: str
    description: str
    status: str
    created_at: Optional[datetime]
