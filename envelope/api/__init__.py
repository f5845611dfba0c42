"""HTTP layer: the envelope response writer and its FastAPI integration.

Key components:
- **writer**: Builds, encodes and writes JSON envelopes to a response sink
- **status**: Reason phrases and fatal status classification
- **schemas**: Pydantic models for the envelope and its status object
- **utils**: Buffered sink producing Starlette responses
- **middleware**: Exception handlers rendering errors as envelopes
- **main**: Application factory for the demo service
"""
