from .aggregate import AggregatedSet, aggregate, implicate
from .antecedent import Antecedent, And, Is, Not, Or
from .base_fis import BaseFIS
from .mamdani import Mamdani
from .rule_base import Consequent, Rule, RuleBase
