# mini_tensegrity/observers - Things that watch and drive a running model
"""
OBSERVERS: CONTROLLERS AND LOGGERS
==================================

An observer is anything with on_setup(model), on_step(model, dt) and
on_teardown(model). Attach it to a TensegrityModel and keep a reference to
it: the model only holds a weak reference.

    controller = SineWaveController.from_json("controlVars.json")
    model.attach(controller)
"""

from .base import Observer
from .controllers import ConstantTensionController, SineWaveConfig, SineWaveController
from .loggers import ActuatorLogger, CenterOfMassLogger, CSVLogger, TimeLogger, append_record

__all__ = [
    'Observer',
    'ConstantTensionController', 'SineWaveConfig', 'SineWaveController',
    'ActuatorLogger', 'CenterOfMassLogger', 'CSVLogger', 'TimeLogger', 'append_record',
]
