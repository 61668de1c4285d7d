# src/vaultgraph/queries.py
"""GraphQL documents for the indexer.

Root queries that are paginated take ``$limit`` and ``$offset``; the
PaginatedFetcher fills them in. Lookup queries take an id list and are
issued once per hop.
"""

ATOM_FIELDS = """
    term_id
    label
    image
    emoji
    type
    creator_id
    data
"""

TERM_FIELDS = """
    id
    total_market_cap
    total_assets
    atom_id
    triple_id
"""

TRIPLE_FIELDS = """
    term_id
    subject_id
    predicate_id
    object_id
    counter_term_id
"""

POSITION_FIELDS = """
    id
    shares
    curve_id
    account_id
    term_id
"""

# --- Lookups (one request per entity kind per hop) ---

ATOMS_BY_IDS = f"""
query GetAtoms($ids: [String!]!) {{
  atoms(where: {{ term_id: {{ _in: $ids }} }}) {{{ATOM_FIELDS}  }}
}}
"""

TERMS_BY_IDS = f"""
query GetTerms($ids: [String!]!) {{
  terms(where: {{ id: {{ _in: $ids }} }}) {{{TERM_FIELDS}  }}
}}
"""

TRIPLES_BY_IDS = f"""
query GetTriples($ids: [String!]!) {{
  triples(where: {{ term_id: {{ _in: $ids }} }}) {{{TRIPLE_FIELDS}  }}
}}
"""

POSITIONS_COUNT = """
query GetPositionsCount($termId: String!) {
  positions_aggregate(where: { term_id: { _eq: $termId }, shares: { _gt: 0 } }) {
    aggregate {
      count
    }
  }
}
"""

# --- Single-entity roots ---

ATOM_BY_ID = f"""
query GetAtom($atomId: String!) {{
  atoms(where: {{ term_id: {{ _eq: $atomId }} }}) {{{ATOM_FIELDS}  }}
}}
"""

TRIPLE_BY_ID = f"""
query GetTriple($tripleId: String!) {{
  triple(term_id: $tripleId) {{{TRIPLE_FIELDS}  }}
}}
"""

# --- Paginated roots ---

ATOMS_BY_CREATOR = f"""
query GetAtomsByCreator($creatorId: String!, $limit: Int!, $offset: Int!) {{
  atoms(
    limit: $limit, offset: $offset, where: {{ creator_id: {{ _eq: $creatorId }} }}
  ) {{{ATOM_FIELDS}  }}
}}
"""

TRIPLES_BY_SUBJECT = f"""
query ClaimsBySubject($subjectId: String!, $limit: Int!, $offset: Int!) {{
  triples(
    limit: $limit, offset: $offset, where: {{ subject_id: {{ _eq: $subjectId }} }}
  ) {{{TRIPLE_FIELDS}  }}
}}
"""

TRIPLES_BY_OBJECT = f"""
query TriplesForObject($objectId: String!, $limit: Int!, $offset: Int!) {{
  triples(
    limit: $limit, offset: $offset, where: {{ object_id: {{ _eq: $objectId }} }}
  ) {{{TRIPLE_FIELDS}  }}
}}
"""

TRIPLES_BY_CREATOR = f"""
query ClaimsByAccount($creatorId: String!, $limit: Int!, $offset: Int!) {{
  triples(
    limit: $limit, offset: $offset, where: {{ creator_id: {{ _eq: $creatorId }} }}
  ) {{{TRIPLE_FIELDS}    creator_id
  }}
}}
"""

TRIPLES_BY_SUBJECTS_PREDICATE_OBJECT = f"""
query GetTriplesBySubjects(
  $subjectIds: [String!]!, $predicateId: String!, $objectId: String!, $limit: Int!, $offset: Int!
) {{
  triples(
    limit: $limit,
    offset: $offset,
    where: {{
      subject_id: {{ _in: $subjectIds }},
      predicate_id: {{ _eq: $predicateId }},
      object_id: {{ _eq: $objectId }}
    }}
  ) {{{TRIPLE_FIELDS}    block_number
    created_at
    transaction_hash
  }}
}}
"""

FOLLOWS = f"""
query GetFollows($predicateId: String!, $userAtomId: String!, $limit: Int!, $offset: Int!) {{
  triples(
    limit: $limit,
    offset: $offset,
    where: {{ predicate_id: {{ _eq: $predicateId }}, subject_id: {{ _eq: $userAtomId }} }}
  ) {{{TRIPLE_FIELDS}  }}
}}
"""

FOLLOWERS = f"""
query GetFollowers($predicateId: String!, $userAtomId: String!, $limit: Int!, $offset: Int!) {{
  triples(
    limit: $limit,
    offset: $offset,
    where: {{ predicate_id: {{ _eq: $predicateId }}, object_id: {{ _eq: $userAtomId }} }}
  ) {{{TRIPLE_FIELDS}  }}
}}
"""

ALL_TRIPLES = f"""
query GetAllTriples($limit: Int!, $offset: Int!) {{
  triples(limit: $limit, offset: $offset) {{{TRIPLE_FIELDS}  }}
}}
"""

ACTIVE_POSITIONS = f"""
query GetActivePositions($accountId: String!, $limit: Int!, $offset: Int!) {{
  positions(
    limit: $limit,
    offset: $offset,
    where: {{ account_id: {{ _eq: $accountId }}, shares: {{ _gt: 0 }} }}
  ) {{{POSITION_FIELDS}    vault {{
      deposits(limit: 1) {{
        vault_type
      }}
      redemptions(limit: 1) {{
        vault_type
      }}
    }}
  }}
}}
"""

ACCOUNT_POSITIONS_FOR_TERMS = f"""
query GetAccountPositions($termIds: [String!]!, $accountId: String!, $limit: Int!, $offset: Int!) {{
  positions(
    limit: $limit,
    offset: $offset,
    where: {{
      term_id: {{ _in: $termIds }},
      account_id: {{ _ilike: $accountId }},
      shares: {{ _gt: 0 }}
    }}
  ) {{{POSITION_FIELDS}  }}
}}
"""

DEPOSITS = """
query GetDeposits($accountId: String!, $limit: Int!, $offset: Int!) {
  deposits(limit: $limit, offset: $offset, where: { sender_id: { _eq: $accountId } }) {
    id
    shares
    assets_after_fees
    created_at
    vault_type
    term_id
  }
}
"""

REDEMPTIONS = """
query GetRedemptions($accountId: String!, $limit: Int!, $offset: Int!) {
  redemptions(limit: $limit, offset: $offset, where: { sender_id: { _eq: $accountId } }) {
    id
    shares
    assets
    created_at
    vault_type
    term_id
  }
}
"""
