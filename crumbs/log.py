import logging


parser_logger = logging.getLogger('crumbs.parser')
jar_logger = logging.getLogger('crumbs.jar')
