from .headers import (
    CONTENT_TYPE_HEADER,
    HTTP_HEADER_PREFIX,
    KAFKA_HEADER_PREFIX,
    HeadersMessageWriter,
    structured_to_binary,
    to_binary_headers,
    to_structured_headers,
)
from .kafka import (
    CloudEventKafkaDeserializer,
    CloudEventKafkaSerializer,
    from_kafka_record,
    to_kafka_headers,
)

__all__ = [
    "CONTENT_TYPE_HEADER",
    "HTTP_HEADER_PREFIX",
    "KAFKA_HEADER_PREFIX",
    "HeadersMessageWriter",
    "structured_to_binary",
    "to_binary_headers",
    "to_structured_headers",
    "CloudEventKafkaDeserializer",
    "CloudEventKafkaSerializer",
    "from_kafka_record",
    "to_kafka_headers",
]
