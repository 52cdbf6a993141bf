"""
The MODEL layer contains the simulation state and its rules.
It has NO knowledge of painting; Qt is used only for signals and timers.
It deals with objects, the background field, experiment modes and time.
"""
