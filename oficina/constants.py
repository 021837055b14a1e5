"""
Fixed business vocabularies: service types, agenda slots, part and ledger categories.
"""
from oficina.models.financial import TransactionType

# Service-order service types: code -> label
SERVICE_TYPES = {
    "revisao": "Revisão",
    "manutencao": "Manutenção",
    "reparo": "Reparo",
    "troca_oleo": "Troca de Óleo",
    "freios": "Sistema de Freios",
    "suspensao": "Suspensão",
    "outro": "Outro",
}

APPOINTMENT_SERVICES = [
    "Troca de Óleo",
    "Revisão Completa",
    "Troca de Pneus",
    "Alinhamento e Balanceamento",
    "Sistema Elétrico",
    "Motor",
    "Freios",
    "Ar-condicionado",
    "Outro",
]

TIME_SLOTS = [
    "08:00", "08:30", "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "13:00", "13:30", "14:00", "14:30", "15:00", "15:30", "16:00", "16:30", "17:00", "17:30",
]

ALL_CATEGORIES = "Todas"

PART_CATEGORIES = [
    "Lubrificantes",
    "Filtros",
    "Freios",
    "Suspensão",
    "Elétrica",
    "Motor",
    "Transmissão",
    "Arrefecimento",
    "Outros",
]

TRANSACTION_CATEGORIES = {
    TransactionType.INCOME: ["Serviço", "Venda de Peças", "Outros"],
    TransactionType.EXPENSE: ["Fornecedor", "Funcionários", "Aluguel", "Contas", "Impostos", "Outros"],
}

SERVICE_REVENUE_CATEGORY = "Serviço"

UPCOMING_APPOINTMENT_DAYS = 3
