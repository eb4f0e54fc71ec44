"""Motor de transición por tick.

Estructura modular:
- random_source.py: RandomValueGenerator
- fluctuation.py: paseo aleatorio acotado
- problem_injector.py: inyección de problemas recuperables
- healing.py: necesidad de curación y controlador de curación
- status_classifier.py: máquina de estados por prioridad
- simulation_step.py: orquestación de un tick completo
"""

from .fluctuation import fluctuate, fluctuate_metric
from .healing import apply_healing, heal_value, metric_needs_healing, needs_healing
from .problem_injector import maybe_inject
from .random_source import RandomValueGenerator
from .simulation_step import DeviceSimulator, create_initial, step, validate_state
from .status_classifier import classify

__all__ = [
    "fluctuate",
    "fluctuate_metric",
    "apply_healing",
    "heal_value",
    "metric_needs_healing",
    "needs_healing",
    "maybe_inject",
    "RandomValueGenerator",
    "DeviceSimulator",
    "create_initial",
    "step",
    "validate_state",
    "classify",
]
