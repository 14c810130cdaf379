from importlib.metadata import version as _get_version, PackageNotFoundError

package = 'rteman'
project = 'rteman'
project_no_spaces = project.replace(' ', '')

try:
    version = _get_version(package)
except PackageNotFoundError:
    version = '0.0.0.dev0'

description = 'rteman (runtime environment manager) – list and switch project runtime environments'
authors = ['The rteman developers']
authors_string = ', '.join(authors)
license = 'MIT'
copyright = '2026 ' + authors_string
