# safety.py
from models import InputAlerts
from dose_calculator import DoseCalculator
from constants import WEIGHT_PROMPT

class InputSupervisor:
    @staticmethod
    def check(weight_kg) -> InputAlerts:
        alerts = InputAlerts()

        # No usable weight: every rate reads zero and the form asks for one
        if not DoseCalculator.is_valid_weight(weight_kg):
            alerts.weight_missing = True
            alerts.message = WEIGHT_PROMPT

        return alerts
