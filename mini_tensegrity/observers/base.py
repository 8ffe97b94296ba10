# mini_tensegrity/observers/base.py
"""Observer capability interface: on_setup / on_step / on_teardown."""


class Observer:
    """
    No-op base for things attached to a TensegrityModel.

    Any object providing these three methods can be attached; subclassing
    only saves writing the ones you do not need.
    """

    def on_setup(self, model) -> None:
        pass

    def on_step(self, model, dt: float) -> None:
        pass

    def on_teardown(self, model) -> None:
        pass
