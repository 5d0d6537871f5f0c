from typing import Generic, List, Optional, Type, TypeVar

from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    """
    Filter-based persistence helper shared by the service repositories.

    Row locks (``lock=True``) only take effect inside ``transaction.atomic()``.
    """

    def __init__(self, model: Type[T]):
        self.model = model

    def _queryset(self, lock: bool = False, **filters) -> models.QuerySet:
        qs = self.model.objects.filter(**filters)
        return qs.select_for_update() if lock else qs

    def get(self, lock: bool = False, **filters) -> Optional[T]:
        return self._queryset(lock, **filters).first()

    def list(self, *order_by: str, **filters) -> List[T]:
        return list(self._queryset(**filters).order_by(*(order_by or ('id',))))

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def save(self, obj: T) -> T:
        obj.save()
        return obj

    def delete(self, obj: T) -> None:
        obj.delete()

    def delete_where(self, **filters) -> int:
        deleted, _ = self.model.objects.filter(**filters).delete()
        return deleted
