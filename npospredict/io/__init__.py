"""Input/output of election inputs and forecasts in file formats.

This subpackage is structured into modules by file format. Currently, the
JSON voter list used by the staking dashboard is supported
(:mod:`npospredict.io.voterlist`).
"""
