from .blocking import blocking_fetch
from .conflated_channel import ConflatedChannel
from .exceptions import ChannelClosedError, ProducerError, ScopeClosedError
from .producer import ProducerResult, RefreshableProducerCell
from .result import Failure, Result, Success, as_result, result_data, success_or
from .state_cell import ObservableCell, ReadOnlyCell
from .supervisor import ProducerScope, ProducerSlot, launch_ui_state_producer
from .ui_state import MergePolicy, UiState

__all__ = [
    'blocking_fetch',
    'ConflatedChannel',
    'ChannelClosedError',
    'ProducerError',
    'ScopeClosedError',
    'ProducerResult',
    'RefreshableProducerCell',
    'Failure',
    'Result',
    'Success',
    'as_result',
    'result_data',
    'success_or',
    'ObservableCell',
    'ReadOnlyCell',
    'ProducerScope',
    'ProducerSlot',
    'launch_ui_state_producer',
    'MergePolicy',
    'UiState',
]
