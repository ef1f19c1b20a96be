from typing import Type, TypeVar, Generic, Optional
from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, **filters) -> Optional[T]:
        return self.model.objects.filter(**filters).first()

    def update(self, obj: T, **data) -> T:
        """Assign ``data`` and write only those columns back."""
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save(update_fields=list(data.keys()) or None)
        return obj
