"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

from ..core.types import Array, TrainingSet


@dataclass(frozen=True)
class DatasetSpec:
    """A named, fully materialised set of training samples.

    Attributes
    ----------
    name:
        Registry name the dataset was built from.
    inputs:
        ``(n, d_in)`` array of input vectors.
    targets:
        ``(n, d_out)`` array of reference output vectors, index aligned with
        ``inputs``.
    provenance:
        Options and sources used to build the dataset, recorded in run
        manifests.
    """

    name: str
    inputs: Array
    targets: Array
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.inputs.shape[1])

    @property
    def d_out(self) -> int:
        return int(self.targets.shape[1])

    @property
    def training_set(self) -> TrainingSet:
        return TrainingSet(inputs=self.inputs, targets=self.targets)

    def __len__(self) -> int:
        return int(self.inputs.shape[0])


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Build the :class:`DatasetSpec` registered as ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")
    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if spec.inputs.ndim != 2 or spec.targets.ndim != 2:
        raise ValueError(f"Dataset {spec.name!r} must provide 2-D inputs and targets")
    if spec.inputs.shape[0] != spec.targets.shape[0]:
        raise ValueError(
            f"Dataset {spec.name!r} has {spec.inputs.shape[0]} inputs "
            f"but {spec.targets.shape[0]} targets"
        )


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
