__all__ = ["Configurable", "load_configs"]

import os
from typing import Any, Mapping, Optional, Type, TypeVar, Union, overload

from .collections.dict import chain_get, chain_get_typed, chain_item, chain_item_typed
from .io.json import load_json
from .io.yaml import load_yaml

T = TypeVar("T")

ConfigSource = Union[str, Mapping[str, Any], None]


def load_configs(configs: ConfigSource) -> dict:
    if configs is None:
        return {}
    if isinstance(configs, str):
        ext = os.path.splitext(configs)[1]
        if ext.lower() == ".json":
            data = load_json(configs)
        else:
            data = load_yaml(configs)
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ValueError(f"invalid config file {configs}: mapping expected")
        return dict(data)
    return dict(configs)


class Configurable:
    """Mixin for components whose parameters come from a file or a mapping.

    ``defaults`` are loaded first and ``configs`` overlaid on top of them, so
    a partial mapping only overrides the keys it names.
    """

    def __init__(self, configs: ConfigSource = None, defaults: ConfigSource = None):
        self.configs = {}
        self.set_configs(load_configs(defaults))
        self.set_configs(load_configs(configs))

    def get_configs(self, deep: bool = True):
        r = {}

        if deep:
            for key, value in self.__dict__.items():
                if isinstance(value, Configurable):
                    r[key] = value.get_configs(deep=True)

        if self.configs:
            r.update(self.configs)

        return r

    @overload
    def get_config(self, *name, required: bool = True) -> Any:
        ...

    @overload
    def get_config(
        self,
        *name,
        required: bool = True,
        typed: Type[T],
        allow_convert: bool = False,
    ) -> T:
        ...

    def get_config(
        self,
        *name,
        required: bool = True,
        typed: Optional[Type[T]] = None,
        allow_convert: bool = False,
    ) -> Union[T, Any, None]:
        if required:
            if typed is not None:
                return chain_item_typed(
                    self.configs, typed, *name, allow_convert=allow_convert
                )
            return chain_item(self.configs, *name)
        else:
            if typed is not None:
                return chain_get_typed(
                    self.configs, typed, *name, allow_convert=allow_convert
                )
            return chain_get(self.configs, *name)

    def set_configs(self, configs: Mapping[str, Any]):
        if not configs:
            return self

        for key, value in configs.items():
            current = self.configs.get(key, None)
            if isinstance(value, Mapping) and isinstance(current, dict):
                self.configs[key] = {**current, **value}
            else:
                self.configs[key] = value

        return self
