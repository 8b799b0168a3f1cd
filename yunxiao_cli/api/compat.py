"""
Compatibility Candidates.

Candidate lists for raw write requests. Some tenants only expose PUT
where the OpenAPI documents PATCH, and older gateways serve change
requests under the legacy /api/v4 merge_requests path.
"""

import re

from yunxiao_cli.api.models import CandidateList, RequestSpec

_OAPI_CHANGE_REQUEST = re.compile(
    r"^/oapi/v1/codeup/organizations/(?P<org>[^/]+)/repositories/(?P<repo>[^/]+)"
    r"/changeRequests/(?P<local_id>[^/?#]+)$"
)


def compat_candidates(spec: RequestSpec) -> CandidateList:
    """Return the request itself followed by its compatible alternates."""
    candidates = [spec]
    if spec.method != "PATCH":
        return tuple(candidates)

    candidates.append(
        RequestSpec("PUT", spec.path, spec.query, spec.body, spec.body_encoding)
    )

    match = _OAPI_CHANGE_REQUEST.match(spec.path)
    if match:
        candidates.append(
            RequestSpec(
                "PUT",
                f"/api/v4/projects/{match['repo']}/merge_requests/{match['local_id']}",
                {**spec.query, "organizationId": match["org"]},
                spec.body,
                spec.body_encoding,
            )
        )
    return tuple(candidates)
