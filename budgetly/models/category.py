from sqlalchemy import Column, Integer, String
from budgetly.database import Base

# Shown for transactions whose category_id has no matching row
FALLBACK_CATEGORY = {"id": None, "name": "Other", "icon": "fas fa-question", "color": "#9E9E9E"}


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(100), nullable=False)  # font-awesome class, e.g. "fas fa-utensils"
    color = Column(String(20), nullable=False)  # hex, e.g. "#F59E0B"

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "icon": self.icon, "color": self.color}
