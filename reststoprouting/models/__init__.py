from .route_models import Coordinate, ResolvedLocation, PathResult, StopRole, Stop, RouteOption

__all__ = ['Coordinate', 'ResolvedLocation', 'PathResult', 'StopRole', 'Stop', 'RouteOption']
