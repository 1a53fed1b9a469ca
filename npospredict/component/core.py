'''Registers of named components.

Arithmetic policies and tie-breaking rules are referred to by short string
names in evaluator parameters (and therefore in serialized configurations and
on the command line). Each component module keeps a dictionary register and
uses the factories here to build its ``mark``, ``get`` and ``construct``
functions. There should normally be no need to use these functions directly.
'''

from typing import Any, Callable, Dict, Tuple, Union


def marker(register: Dict[str, Any],
           name: str,
           ) -> Callable[[Any], Any]:
    '''A registration decorator factory.

    The decorated object is registered under its ``name`` attribute if it
    has one, under its ``__name__`` otherwise.
    '''
    def mark(obj):
        register[getattr(obj, 'name', obj.__name__)] = obj
        return obj
    return mark


def getter(register: Dict[str, Any],
           name: str,
           ) -> Callable[[str], Any]:
    '''A register retriever factory.'''
    def get(key: str) -> Any:
        try:
            return register[key]
        except KeyError:
            raise KeyError(
                f'unknown {name}: {key}, available: '
                + ', '.join(sorted(register))
            )
    get.__doc__ = f'Return a {name} by its name.'
    return get


def constructer(register: Dict[str, Any],
                name: str,
                ) -> Callable[[Union[str, Any]], Any]:
    '''A register implicit retriever/passthrough function factory.

    Registered classes are instantiated when retrieved by name; objects
    that are not strings are passed through unchanged.
    '''
    get = getter(register, name)

    def construct(definition: Union[str, Any]) -> Any:
        if not isinstance(definition, str):
            return definition
        found = get(definition)
        return found() if isinstance(found, type) else found

    construct.__doc__ = (
        f'Construct a {name} from its name, or pass a custom one through.'
    )
    return construct


def register_components(register: Dict[str, Any],
                        name: str,
                        ) -> Tuple[Callable, Callable, Callable]:
    '''Construct the marker, getter and constructer functions at one call.'''
    return (
        marker(register, name),
        getter(register, name),
        constructer(register, name),
    )
