import re


def http_response(status, body=b"", content_type="text/plain; charset=utf-8"):
    return (b"HTTP/1.1 " + status.encode("utf-8") + b"\r\nContent-Type: " + content_type.encode("utf-8")
            + b"\r\nContent-Length: " + str(len(body)).encode("utf-8")
            + b"\r\nX-Content-Type-Options: nosniff\r\nConnection: close\r\n\r\n" + body)


class Router:
    def __init__(self):
        self.routes = []

    def add_route(self, method, path, func):
        # method "*" matches any method
        path = re.compile(path)
        self.routes.append([method, path, func])

    def route_request(self, request):
        for route in self.routes:
            method = route[0]
            path = route[1]
            func = route[2]
            if method in ("*", request.method) and path.match(request.path):
                return func(request)
        return http_response("404 Not Found")
