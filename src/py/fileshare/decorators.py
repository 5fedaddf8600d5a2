from typing import ClassVar, Union, Callable, TypeVar, Any, cast

T = TypeVar("T")


class Extra:
	"""Defines the attributes set by decorators on handler functions."""

	ON: ClassVar[str] = "_fileshare_on"
	ON_PRIORITY: ClassVar[str] = "_fileshare_on_priority"

	@staticmethod
	def Meta(scope: Any) -> dict[str, Any]:
		"""Returns the dictionary of meta attributes for the given value."""
		if isinstance(scope, type):
			if not hasattr(scope, "__fileshare__"):
				setattr(scope, "__fileshare__", {})
			return cast(dict[str, Any], getattr(scope, "__fileshare__"))
		elif hasattr(scope, "__dict__"):
			return cast(dict[str, Any], scope.__dict__)
		else:
			raise RuntimeError(f"Metadata cannot be attached to object: {scope}")


def on(
	priority: int = 0, **methods: Union[str, list[str], tuple[str, ...]]
) -> Callable[[T], T]:
	"""The @on decorator marks a service method as the handler of the
	HTTP requests matching the given methods and route templates.

	Keyword names are HTTP methods, several methods can be joined with
	an underscore, and values are one or more route templates (see `Route`):

	>    @on(GET_HEAD=("/", "/{path:any}"))
	>    def read(self, request, path):
	>        ....

	The decorated method takes the `request` and the parameters extracted
	from the route, and must return a response."""

	def decorator(function: T) -> T:
		meta = Extra.Meta(function)
		v = meta.setdefault(Extra.ON, [])
		meta.setdefault(Extra.ON_PRIORITY, priority)
		for http_methods, url in list(methods.items()):
			urls = (url,) if isinstance(url, str) else url
			for http_method in http_methods.upper().split("_"):
				for _ in urls:
					v.append((http_method, _))
		return function

	return decorator


# EOF
