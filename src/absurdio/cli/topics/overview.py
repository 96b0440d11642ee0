OVERVIEW = """
TOPIC: overview
===============

absurdio runs background tasks that are supposed to run forever and stops
all of them as soon as one of them stops.

BUILDING BLOCKS:
    absurd_future(aw)      Wrap a `-> Never` awaitable so it fits any output type
    absurd_result(aw)      Re-type a `Result[Never, E]`; Err passes through unchanged
    FailFastGroup          First task to finish cancels the rest and raises

FAILURE TAXONOMY (what a group raises):
    TaskFailedError        A task returned Err(e)                       exit 1
    TaskCrashedError       A task raised an exception                   exit 1
    TaskCancelledError     A task was cancelled from outside the group  exit 1
    EmptyGroupError        The group had no tasks                       exit 1
    ImpossibleStateError   A Never-typed task returned a value          exit 70

Every SupervisionError carries a FailureReport (pydantic model):
    e.report.kind, e.report.task, e.report.cancelled, e.report.render()
"""
