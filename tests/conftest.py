pytest_plugins = 'crumbs.pytest_plugin'
