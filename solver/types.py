Grid = list[list[int]]
Cell = tuple[int, int]
TraceLog = list[str]
TraceStep = dict[str, object]
