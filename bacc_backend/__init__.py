"""Child-care cost-share allowance (BACC) calculator backend."""
