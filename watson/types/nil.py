from __future__ import annotations


class NilType:
    __slots__ = ()

    _instance: NilType | None = None

    def __new__(cls):
        # Singleton: copy/deepcopy and pickling all hand back the same object
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self): return "nil"
    def __bool__(self): return False

    def __reduce__(self):
        return (NilType, ())

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    # Nil is equal only to Nil
    def __eq__(self, other):
        return isinstance(other, NilType)

    def __hash__(self):
        return hash(NilType)


Nil = NilType()
