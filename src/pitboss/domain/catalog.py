"""Display labels for incident, report, fine and absence codes.

Labels are the Bulgarian strings shown to floor staff. Unknown codes fall
back to the code itself.
"""

INCIDENT_TYPES = {
    "dealing_error": "Грешка при раздаване",
    "procedure_violation": "Нарушение на процедура",
    "customer_complaint": "Оплакване от клиент",
    "cash_handling": "Грешка с пари/чипове",
    "late_arrival": "Закъснение",
    "early_departure": "Ранно напускане",
    "unprofessional_behavior": "Непрофесионално поведение",
    "dress_code": "Нарушение на дрескод",
    "equipment_damage": "Повреда на оборудване",
    "security_issue": "Проблем със сигурността",
    "other": "Друго",
}

REPORT_STATUS = {
    "active": "Активен",
    "resolved": "Решен",
    "dismissed": "Отхвърлен",
}

FINE_STATUS = {
    "pending": "Чака одобрение",
    "approved": "Одобрена",
    "rejected": "Отхвърлена",
    "paid": "Платена",
}

ABSENCE_REASONS = {
    "sick": "Болест",
    "injured": "Пострадал",
    "unauthorized": "Своеволен",
    "voluntary": "Тръгнал си доброволно",
    "break": "Освободен за почивка",
}

REST_LABEL = "ПОЧИВКА"
TIME_HEADER = "Време"
UNKNOWN_DEALER = "Неизвестен"


def label(catalog: dict[str, str], code: str) -> str:
    return catalog.get(code, code)
