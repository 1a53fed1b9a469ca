'''Serialization of evaluators and forecast results to JSON-ready values.

Evaluators and number policies decorated with :func:`simple_serialization`
gain a ``to_dict()`` method recording their class and constructor
parameters, so that a configured forecast pipeline can be stored and rebuilt
by :func:`from_dict`::

    {"class": "npospredict.evaluate.rank.SequentialPhragmenRanker",
     "iterations": 10,
     "arithmetic": {
         "class": "npospredict.component.arithmetic.FractionArithmetic"
     },
     "tie_breaker": "input_order",
     "tolerance": 0}

Forecast results serialize through :func:`serialize_value` as well. Stakes
and scores are exact numbers that JSON cannot hold; they are stored as
strings tagged with their type (``{"type": "Fraction", "value": "100/3"}``)
so that no precision is lost on the way back.
'''

import inspect
import importlib
from fractions import Fraction
from decimal import Decimal
from typing import Any, Callable, Dict


TAGGED_TYPES: Dict[str, Callable[[Any], Any]] = {
    'Fraction': Fraction,
    'Decimal': Decimal,
    'tuple': tuple,
}

JSON_SCALARS = (str, int, float, bool, type(None))


def simple_serialization(class_: type) -> type:
    '''A class decorator adding a ``to_dict()`` serialization method.

    The serialized parameters are the names listed in the class's
    ``serialize_params`` attribute, or its constructor parameters by
    default. The instances must keep each parameter in an attribute of the
    same name.
    '''
    if hasattr(class_, 'serialize_params'):
        param_names = list(class_.serialize_params)
    elif class_.__init__ is object.__init__:
        param_names = []
    else:
        param_names = [
            name for name, param
            in inspect.signature(class_.__init__).parameters.items()
            if name != 'self' and param.kind not in (
                param.VAR_POSITIONAL, param.VAR_KEYWORD
            )
        ]

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': qualified_name(type(self))}
        out_dict.update(
            (name, serialize_value(getattr(self, name)))
            for name in param_names
        )
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    '''Convert a value to a structure of JSON-compatible types.

    :raises ValueError: If the value has no JSON representation.
    '''
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, JSON_SCALARS):
        return value
    elif isinstance(value, (Fraction, Decimal)):
        return {'type': type(value).__name__, 'value': str(value)}
    elif isinstance(value, tuple):
        return {'type': 'tuple', 'value': [serialize_value(v) for v in value]}
    elif isinstance(value, dict):
        if not all(isinstance(key, str) for key in value):
            raise ValueError(f'cannot serialize non-string keys of {value!r}')
        return {key: serialize_value(val) for key, val in value.items()}
    elif isinstance(value, list):
        return [serialize_value(val) for val in value]
    elif callable(value) and hasattr(value, '__qualname__'):
        return {'callable': qualified_name(value)}
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    '''Reverse :func:`serialize_value`, rebuilding objects and numbers.'''
    if isinstance(value, list):
        return [deserialize_value(val) for val in value]
    elif not isinstance(value, dict):
        if isinstance(value, JSON_SCALARS):
            return value
        raise ValueError(f'cannot deserialize {value!r}, type unknown')
    elif 'class' in value:
        return from_dict(value)
    elif set(value) == {'callable'}:
        return import_object(value['callable'])
    elif set(value) == {'type', 'value'} and value['type'] in TAGGED_TYPES:
        tagged = value['value']
        if isinstance(tagged, list):
            tagged = [deserialize_value(val) for val in tagged]
        return TAGGED_TYPES[value['type']](tagged)
    else:
        return {key: deserialize_value(val) for key, val in value.items()}


def from_dict(value: Dict[str, Any]) -> Any:
    '''Rebuild an evaluator object from its ``to_dict()`` form.

    :raises ValueError: If the dictionary does not describe an object.
    '''
    if not isinstance(value, dict):
        raise ValueError(f'object definition must be a dict, got {value!r}')
    class_name = value.get('class')
    if not is_qualified_name(class_name):
        raise ValueError(f'invalid object class: {class_name!r}')
    cls = import_object(class_name)
    params = {
        key: deserialize_value(val)
        for key, val in value.items() if key != 'class'
    }
    return cls(**params)


def to_dict(obj: Any) -> Dict[str, Any]:
    '''Serialize an evaluator or a result object.'''
    return serialize_value(obj)


def import_object(name: str) -> Any:
    module_name, attr = name.rsplit('.', 1)
    return getattr(importlib.import_module(module_name), attr)


def qualified_name(obj: Any) -> str:
    return f'{obj.__module__}.{obj.__qualname__}'


def is_qualified_name(value: Any) -> bool:
    '''Whether the value is a dotted name of a module-level object.'''
    if not isinstance(value, str):
        return False
    chunks = value.split('.')
    return len(chunks) > 1 and all(chunk.isidentifier() for chunk in chunks)
