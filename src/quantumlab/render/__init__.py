"""
The RENDER layer turns simulation state into draw commands (`renderer`) and
executes those commands on a QPainter (`painter`).
"""
