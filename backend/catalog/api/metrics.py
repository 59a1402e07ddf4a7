from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from typing import Dict, Any
from datetime import datetime
import time
import threading
from collections import defaultdict

router = APIRouter()


class MetricsCollector:
    """Thread-safe in-process request metrics."""
    
    def __init__(self):
        self._lock = threading.Lock()
        self._route_timings = defaultdict(list)  # route -> [duration_ms, ...]
        self._route_errors = defaultdict(int)    # route -> responses with status >= 400
        self._status_counts = defaultdict(int)   # status code -> count
        self._start_time = time.time()
        
        # Keep only recent data (last 1000 entries per route)
        self._max_entries = 1000
    
    def record_request(self, route: str, status_code: int, duration_ms: float):
        """Record one handled request."""
        with self._lock:
            timings = self._route_timings[route]
            timings.append(duration_ms)
            if len(timings) > self._max_entries:
                timings.pop(0)
            self._status_counts[status_code] += 1
            if status_code >= 400:
                self._route_errors[route] += 1
    
    def reset(self):
        with self._lock:
            self._route_timings.clear()
            self._route_errors.clear()
            self._status_counts.clear()
            self._start_time = time.time()
    
    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics snapshot."""
        with self._lock:
            uptime_seconds = time.time() - self._start_time
            
            route_stats = {}
            for route, timings in self._route_timings.items():
                if timings:
                    route_stats[route] = {
                        "count": len(timings),
                        "errors": self._route_errors.get(route, 0),
                        "avg_ms": sum(timings) / len(timings),
                        "min_ms": min(timings),
                        "max_ms": max(timings),
                        "p95_ms": self._percentile(timings, 95),
                        "p99_ms": self._percentile(timings, 99)
                    }
            
            return {
                "timestamp": datetime.now().isoformat(),
                "uptime_seconds": uptime_seconds,
                "requests_total": sum(self._status_counts.values()),
                "status_codes": {str(code): count for code, count in sorted(self._status_counts.items())},
                "routes": route_stats
            }
    
    def _percentile(self, data: list, percentile: int) -> float:
        """Calculate percentile of a list."""
        if not data:
            return 0
        sorted_data = sorted(data)
        index = int((percentile / 100) * len(sorted_data))
        return sorted_data[min(index, len(sorted_data) - 1)]


# Global metrics collector instance
metrics_collector = MetricsCollector()


@router.get("/metrics")
async def get_metrics():
    """Get request metrics in JSON format."""
    return metrics_collector.get_metrics()


@router.get("/metrics/prometheus", response_class=PlainTextResponse)
async def get_prometheus_metrics():
    """Get metrics in Prometheus text format."""
    metrics = metrics_collector.get_metrics()
    
    prometheus_lines = [
        "# HELP city_catalog_uptime_seconds Application uptime in seconds",
        "# TYPE city_catalog_uptime_seconds counter",
        f"city_catalog_uptime_seconds {metrics['uptime_seconds']}",
        "",
        "# HELP city_catalog_requests_total Total handled requests by status code",
        "# TYPE city_catalog_requests_total counter",
    ]
    for code, count in metrics["status_codes"].items():
        prometheus_lines.append(f"city_catalog_requests_total{{status=\"{code}\"}} {count}")
    prometheus_lines.append("")
    
    prometheus_lines.extend([
        "# HELP city_catalog_request_duration_ms Request duration in milliseconds",
        "# TYPE city_catalog_request_duration_ms summary"
    ])
    for route, stats in metrics["routes"].items():
        prometheus_lines.extend([
            f"city_catalog_request_duration_ms_count{{route=\"{route}\"}} {stats['count']}",
            f"city_catalog_request_duration_ms_sum{{route=\"{route}\"}} {stats['avg_ms'] * stats['count']}",
            f"city_catalog_request_duration_ms{{route=\"{route}\",quantile=\"0.95\"}} {stats['p95_ms']}",
        ])
    prometheus_lines.append("")
    
    return "\n".join(prometheus_lines)
