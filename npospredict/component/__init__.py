'''Named pluggable components of the election evaluators.

The :mod:`arithmetic` module holds the exact number policies, the
:mod:`tiebreak` module the rules to choose among tied candidates.
'''
