from config import GRAPHQL_URL, GRAPHQL_TIMEOUT
from core.graphql import GraphQLClient

graphql = GraphQLClient(GRAPHQL_URL, timeout=GRAPHQL_TIMEOUT)
