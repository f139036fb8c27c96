from civicscan.inference.models import EndpointCandidate

# Tried strictly in this order; the first success wins.
DEFAULT_ENDPOINT_CANDIDATES: tuple[EndpointCandidate, ...] = (
    EndpointCandidate(
        name="detect",
        url_template="https://detect.roboflow.com/{workspace}/{workflow}",
        key_in_query=True,
    ),
    EndpointCandidate(
        name="api",
        url_template="https://api.roboflow.com/{workspace}/{workflow}",
        key_in_query=True,
    ),
    EndpointCandidate(
        name="serverless",
        url_template="{api_url}/{workspace}/{workflow}",
        key_in_query=True,
    ),
    EndpointCandidate(
        name="serverless_workflows",
        url_template="{api_url}/workflows/{workspace}/{workflow}",
        key_in_query=False,
    ),
)


def render_url(candidate: EndpointCandidate, *, api_url: str, workspace: str, workflow: str) -> str:
    """Fill a candidate's template. The API key is never part of the URL text."""
    return candidate.url_template.format(
        api_url=api_url.rstrip("/"),
        workspace=workspace,
        workflow=workflow,
    )
