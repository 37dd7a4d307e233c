from api.routes.problems import ProblemController

__all__ = ["ProblemController"]
