"""Action maps — translate template UI actions into tool invocations.

Each tool family identified by a name prefix may register one action map.
Families without one get action descriptions generated from the tools'
own metadata in the capability catalog.
"""
