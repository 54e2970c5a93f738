"""Per-connection dispatch results."""

from pydantic import BaseModel, Field


class ConnectionResult(BaseModel):
    """Outcome of one remote assignment.

    Attributes:
        connection: Name of the connection the call was sent to
        output: Name the result was assigned to
        expression: Serialized call expression that was submitted
        assigned: True if the assignment call returned without error
        exists: Whether the output object was found after assignment
            (None when the check was not reached)
        error: Error message when the assignment failed
    """

    connection: str
    output: str
    expression: str
    assigned: bool
    exists: bool | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.assigned and self.exists is not False


class DispatchReport(BaseModel):
    """Aggregated outcome of one operation across every connection."""

    operation: str
    output: str
    results: list[ConnectionResult] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def succeeded_connections(self) -> list[str]:
        return [result.connection for result in self.results if result.ok]

    @property
    def failed_connections(self) -> list[str]:
        return [result.connection for result in self.results if not result.ok]

    def raise_for_failures(self) -> "DispatchReport":
        """Raise PartialDispatchFailure if any connection failed.

        Returns:
            The report itself, so calls can be chained

        Raises:
            PartialDispatchFailure: If one or more connections did not end up
                holding the output object
        """
        if not self.ok:
            from dsspatial.dispatch.errors import PartialDispatchFailure

            raise PartialDispatchFailure(self)
        return self
