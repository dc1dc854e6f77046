"""Category labels offered per transaction type."""

from finflow.domain.entities import TransactionType

# Reserved for transactions generated by debt payments
PAYMENT_CATEGORY = "Pagos/Cobros"

# Default labels offered by the CLI; the ledger only relies on PAYMENT_CATEGORY
CATEGORIES: dict[TransactionType, tuple[str, ...]] = {
    TransactionType.INCOME: (
        "Salario",
        "Freelance",
        "Inversiones",
        "Regalos",
        "Otros ingresos",
    ),
    TransactionType.EXPENSE: (
        "Comida",
        "Transporte",
        "Vivienda",
        "Servicios",
        "Salud",
        "Entretenimiento",
        "Educación",
        "Compras",
        "Otros gastos",
    ),
}


def categories_for(transaction_type: TransactionType) -> tuple[str, ...]:
    """Return the selectable labels for a transaction type."""
    return CATEGORIES[TransactionType(transaction_type)]


def default_category(transaction_type: TransactionType) -> str:
    """Return the label preselected for a new transaction of this type."""
    return categories_for(transaction_type)[0]
