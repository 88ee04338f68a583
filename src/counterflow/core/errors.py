class CounterError(Exception):
    """Base exception for counter engine errors"""
    pass


class StaleTimerFire(CounterError):
    """Raised internally when a superseded or cancelled reset tries to fire"""

    def __init__(self, generation: int):
        super().__init__(f"Deferred reset #{generation} lost authority before firing")
        self.generation = generation


class EngineClosedError(CounterError):
    """Raised when an action is submitted after the engine was closed"""
    pass
