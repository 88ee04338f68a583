from typing import Any, ClassVar, Dict

from pydantic import BaseModel


class SignalDescriptor:
    """Return `$namespace.field` on the class, real value on an instance."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name

    def __get__(self, instance, owner):
        #  class access  →  owner is the model class, instance is None
        if instance is None:
            ns = getattr(owner, "namespace", None) or owner.__name__
            return f"${ns}.{self.field_name}"

        #  instance access  →  behave like a normal attribute
        return instance.__dict__[self.field_name]

    def __repr__(self):
        return f"SignalDescriptor({self.field_name})"


class SignalModel(BaseModel):
    """
    Base model whose fields double as Datastar signal names.

    Every field ``foo`` gets a class attribute ``Sfoo`` that renders as
    ``$<namespace>.foo`` for UI binding, while ``instance.Sfoo`` returns
    the plain value.
    """

    namespace: ClassVar[str] = ""

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)

        if not cls.namespace:
            cls.namespace = cls.__name__

        for field_name in cls.model_fields:
            setattr(cls, f"S{field_name}", SignalDescriptor(field_name))
        for field_name in cls.model_computed_fields:
            setattr(cls, f"S{field_name}", SignalDescriptor(field_name))

    @property
    def signals(self) -> Dict[str, Any]:
        """Namespaced signal payload for this snapshot."""
        return {self.namespace: self.model_dump()}
