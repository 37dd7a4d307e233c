from litestar.datastructures import State

from services import (
    LinkImportService,
    MetadataSyncService,
    ProblemImportService,
    ProblemService,
)


def provide_problem_service(state: State) -> ProblemService:
    return state.services.problem_service


def provide_import_service(state: State) -> ProblemImportService:
    return state.services.import_service


def provide_link_import_service(state: State) -> LinkImportService:
    return state.services.link_import_service


def provide_metadata_sync_service(state: State) -> MetadataSyncService:
    return state.services.metadata_sync_service
