import enum

class StockStatus(str, enum.Enum):
    below_par = "Below Par"
    at_par = "At Par"
    above_par = "Above Par"

class CatalogSource(str, enum.Enum):
    memory = "memory"
    db = "db"
